"""Report model assembly.

Packages aggregation outputs into the immutable ReportModel and checks, before
any rendering starts, that every dataset the slide deck draws from exists.
"""

import logging
from typing import FrozenSet, Iterable, Optional

from src.analytics.engine import Aggregates
from src.errors import IncompleteReportModel
from src.models.schemas import ClientProfile, DatasetKey, DateWindow, ReportModel

logger = logging.getLogger(__name__)

REQUIRED_DATASETS: FrozenSet[str] = frozenset(k.value for k in DatasetKey)


class ReportModelBuilder:
    """Builds ReportModel values from aggregates."""

    def __init__(self, required_datasets: Optional[Iterable[str]] = None):
        self.required_datasets = frozenset(required_datasets or REQUIRED_DATASETS)

    def build(
        self,
        client: ClientProfile,
        window: DateWindow,
        aggregates: Aggregates,
    ) -> ReportModel:
        """
        Assemble the report model.

        Args:
            client: The client the report is for.
            window: Report date window.
            aggregates: Output of AggregationEngine.run.

        Returns:
            Immutable ReportModel.

        Raises:
            IncompleteReportModel: If a required dataset is not produced.
        """
        model = ReportModel(
            client_id=client.id,
            client_name=client.name,
            industry_name=aggregates.industry_name,
            date_range_label=window.label,
            start_date=window.start,
            end_date=window.end,
            logo_path=client.logo_path,
            total_stories=aggregates.media_distribution.total,
            scope_of_coverage=aggregates.scope_of_coverage,
            media_distribution=aggregates.media_distribution,
            monthly_trend=aggregates.monthly_trend,
            thematic_areas=aggregates.thematic_areas,
            journalists=aggregates.journalists,
            org_visibility=aggregates.org_visibility,
            client_visibility=aggregates.client_visibility,
            competitor_analysis=aggregates.competitor_analysis,
            sentiment=aggregates.sentiment,
            key_takeouts=aggregates.key_takeouts,
        )
        self.validate(model)
        return model

    def validate(self, model: ReportModel) -> None:
        """Fail fast when a required dataset is missing."""
        missing = self.required_datasets - set(model.datasets())
        if missing:
            logger.error(f"Report model for {model.client_id} is missing datasets: {sorted(missing)}")
            raise IncompleteReportModel(missing)
