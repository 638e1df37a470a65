"""Error taxonomy for report generation.

Every failure raised by the pipeline carries a ``kind`` so the API layer can
log the structured cause while returning a generic message to the user.
"""

from typing import Iterable, Optional


class ReportError(Exception):
    """Base class for report pipeline failures."""

    kind: str = "report_error"


class NotFound(ReportError):
    """Raised when a client or entity id does not resolve in the catalog."""

    kind = "not_found"

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found: {entity_id}")


class AggregationFailed(ReportError):
    """Raised when the corpus or catalog fetch fails (storage error or timeout)."""

    kind = "aggregation_failed"

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{message} (source: {source})"
        super().__init__(message)


class IncompleteReportModel(ReportError):
    """Raised when a slide references a dataset the report model does not provide."""

    kind = "incomplete_report_model"

    def __init__(self, missing: Iterable[str]):
        self.missing = sorted(set(missing))
        super().__init__(f"Report model is missing datasets: {', '.join(self.missing)}")
