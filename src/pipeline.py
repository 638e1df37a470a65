"""Report pipeline that coordinates all components."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from src.analytics.builder import ReportModelBuilder
from src.analytics.corpus import CorpusSelector, bounded_fetch
from src.analytics.dates import resolve_date_window
from src.analytics.engine import AggregationEngine
from src.analytics.keywords import build_keyword_set
from src.config import Settings, get_settings
from src.errors import NotFound
from src.export.packager import package
from src.export.palette import DEFAULT_PALETTE, Palette
from src.export.pdf_report import PDFReportRenderer
from src.export.pptx_deck import PptxDeckRenderer
from src.export.slides_deck import SlideDeckCompiler
from src.models.schemas import ExportPayload, ReportModel, ReportRequest
from src.providers.base import EntityCatalogProvider, StoryCorpusProvider

logger = logging.getLogger(__name__)


class ReportPipeline:
    """
    Builds PR presence reports end to end.

    Orchestrates:
    1. Client and keyword resolution
    2. Concurrent corpus and peer-organization fetch
    3. Aggregation and report model assembly
    4. Slide deck compilation, rendering and packaging
    """

    def __init__(
        self,
        catalog: EntityCatalogProvider,
        stories: StoryCorpusProvider,
        settings: Optional[Settings] = None,
        palette: Palette = DEFAULT_PALETTE,
    ):
        """Initialize the pipeline with its providers and renderers."""
        self.settings = settings or get_settings()
        self.catalog = catalog
        self.selector = CorpusSelector(stories, timeout=self.settings.storage_timeout)
        self.engine = AggregationEngine()
        self.builder = ReportModelBuilder()
        self.compiler = SlideDeckCompiler(brand_name=self.settings.brand_name)
        self.pptx_renderer = PptxDeckRenderer(palette)
        self.pdf_renderer = PDFReportRenderer(palette, segments=self.settings.pie_segments)

    async def build_model(self, request: ReportRequest, now: Optional[datetime] = None) -> ReportModel:
        """
        Build the report model for a request.

        Args:
            request: Client id and date range.
            now: Fixed "now" for preset windows; defaults to the current UTC time.

        Returns:
            The immutable ReportModel.

        Raises:
            NotFound: Unknown client.
            AggregationFailed: A storage read failed or timed out.
            IncompleteReportModel: A required dataset was not produced.
        """
        now = now or datetime.now(timezone.utc)
        window = resolve_date_window(request.date_range, now)

        client = await bounded_fetch(
            self.catalog.get_client(request.client_id),
            self.settings.storage_timeout,
            "client",
        )
        if client is None:
            logger.warning(f"Report requested for unknown client {request.client_id}")
            raise NotFound("client", request.client_id)

        industry = client.primary_industry
        industry_id = industry.id if industry else None
        client_keywords = build_keyword_set(client.entity)

        # One fan-out/fan-in barrier: the corpus and the peer list
        corpus, organizations = await asyncio.gather(
            self.selector.select(window, industry_id=industry_id, keywords=client_keywords),
            bounded_fetch(
                self.catalog.list_industry_organizations(industry_id),
                self.settings.storage_timeout,
                "industry organizations",
            ),
        )

        logger.info(
            f"Selected {len(corpus)} stories for {client.name} "
            f"({window.start:%Y-%m-%d} to {window.end:%Y-%m-%d})"
        )
        aggregates = self.engine.run(corpus, client, organizations)
        return self.builder.build(client, window, aggregates)

    def render_pptx(self, model: ReportModel) -> ExportPayload:
        """Compile, render and package the PPTX deck."""
        deck = self.compiler.compile(model)
        document = self.pptx_renderer.render(deck, model)
        return self._package(model, document, "pptx")

    def render_pdf(self, model: ReportModel) -> ExportPayload:
        """Compile, render and package the PDF deck."""
        deck = self.compiler.compile(model)
        document = self.pdf_renderer.render(deck, model)
        return self._package(model, document, "pdf")

    async def export_pptx(self, request: ReportRequest, now: Optional[datetime] = None) -> ExportPayload:
        return await self._export(request, now, self.render_pptx)

    async def export_pdf(self, request: ReportRequest, now: Optional[datetime] = None) -> ExportPayload:
        return await self._export(request, now, self.render_pdf)

    async def _export(self, request: ReportRequest, now: Optional[datetime], render) -> ExportPayload:
        model = await self.build_model(request, now)
        # Rendering is CPU-bound; keep it off the event loop
        return await asyncio.to_thread(render, model)

    def _package(self, model: ReportModel, document: bytes, extension: str) -> ExportPayload:
        payload = package(
            document,
            client_name=model.client_name,
            report_kind=self.settings.report_kind,
            date_range_label=model.date_range_label,
            extension=extension,
        )
        logger.info(f"Packaged {payload.filename} ({len(document)} bytes)")
        return payload
