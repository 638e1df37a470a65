"""Pydantic models for structured data."""

from .schemas import (
    ClientProfile,
    CompetitorAnalysis,
    Dataset,
    DatasetKey,
    DateWindow,
    Entity,
    ExportPayload,
    MediaType,
    ReportModel,
    ReportRequest,
    Sentiment,
    Story,
)
from .slides import (
    ChartElement,
    ChartType,
    Slide,
    SlideDeck,
    SlideKind,
)

__all__ = [
    "ChartElement",
    "ChartType",
    "ClientProfile",
    "CompetitorAnalysis",
    "Dataset",
    "DatasetKey",
    "DateWindow",
    "Entity",
    "ExportPayload",
    "MediaType",
    "ReportModel",
    "ReportRequest",
    "Sentiment",
    "Slide",
    "SlideDeck",
    "SlideKind",
    "Story",
]
