"""Export packaging: base64 payload plus a filename derived from the report."""

import base64
import re

from src.models.schemas import ExportPayload

_WHITESPACE = re.compile(r"\s+")


def export_filename(client_name: str, report_kind: str, date_range_label: str, extension: str) -> str:
    """
    Build ``{client}_{kind}_{label}.{ext}`` with whitespace runs replaced by ``_``.

    Args:
        client_name: Client display name.
        report_kind: Report kind, e.g. "PR_Presence_Analysis".
        date_range_label: Human readable date range.
        extension: File extension without the dot.

    Returns:
        The filename.
    """
    base = f"{client_name}_{report_kind}_{date_range_label}"
    return f"{_WHITESPACE.sub('_', base.strip())}.{extension.lstrip('.')}"


def package(
    document: bytes,
    client_name: str,
    report_kind: str,
    date_range_label: str,
    extension: str,
) -> ExportPayload:
    """Wrap rendered document bytes for transport."""
    return ExportPayload(
        data=base64.b64encode(document).decode("ascii"),
        filename=export_filename(client_name, report_kind, date_range_label, extension),
    )
