"""FastAPI application for the PR Presence report engine."""

import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config import Settings, get_settings
from src.errors import NotFound, ReportError
from src.models.schemas import CustomDateRange, ExportPayload, ReportRequest
from src.pipeline import ReportPipeline
from src.providers.base import EntityCatalogProvider, StoryCorpusProvider
from src.providers.memory import InMemoryCatalog, InMemoryStoryStore, load_snapshot

# Configure logging
logging.basicConfig(level=get_settings().log_level.upper())
logger = logging.getLogger(__name__)


def _report_failure(exc: ReportError, client_id: str) -> HTTPException:
    """Map a pipeline failure to a generic HTTP error; the kind is only logged."""
    if isinstance(exc, NotFound):
        return HTTPException(status_code=404, detail="Client not found")
    logger.error(f"Report failed for client {client_id} [{exc.kind}]: {exc}")
    return HTTPException(status_code=500, detail="export failed")


def _default_providers(settings: Settings):
    if settings.has_snapshot:
        return load_snapshot(settings.snapshot_path)
    logger.warning("No corpus snapshot configured; serving an empty catalog")
    return InMemoryCatalog(), InMemoryStoryStore()


def create_app(
    catalog: Optional[EntityCatalogProvider] = None,
    stories: Optional[StoryCorpusProvider] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        catalog: Entity catalog provider; defaults to the configured snapshot.
        stories: Story corpus provider; defaults to the configured snapshot.
        settings: Application settings.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or get_settings()
    if catalog is None or stories is None:
        default_catalog, default_stories = _default_providers(settings)
        catalog = catalog or default_catalog
        stories = stories or default_stories

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management."""
        logger.info("Starting PR Presence report API...")
        yield
        logger.info("Shutting down PR Presence report API...")

    app = FastAPI(
        title="PR Presence Report API",
        description="Media presence analytics and PPTX/PDF report exports for monitored clients.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.pipeline = ReportPipeline(catalog, stories, settings=settings)

    # CORS middleware for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/reports/pr-presence-analytics")
    async def pr_presence_analytics(
        request: Request,
        client_id: Optional[str] = Query(None, alias="clientId"),
        date_range: str = Query(settings.default_date_range, alias="dateRange"),
        start_date: Optional[date] = Query(None, alias="startDate"),
        end_date: Optional[date] = Query(None, alias="endDate"),
    ):
        """
        Compute the report model for a client.

        ``startDate``/``endDate`` together override the ``dateRange`` preset.
        """
        if not client_id:
            raise HTTPException(status_code=400, detail="Client ID is required")

        try:
            if start_date and end_date:
                report_range = CustomDateRange(start_date=start_date, end_date=end_date)
            else:
                report_range = date_range
            report_request = ReportRequest(client_id=client_id, date_range=report_range)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date range")

        pipeline: ReportPipeline = request.app.state.pipeline
        try:
            model = await pipeline.build_model(report_request)
        except ReportError as e:
            raise _report_failure(e, client_id)
        return model.model_dump(mode="json")

    @app.post("/api/reports/export-pr-presence", response_model=ExportPayload)
    async def export_pr_presence(report_request: ReportRequest, request: Request):
        """Export the report as a native-chart PPTX deck (base64 payload)."""
        pipeline: ReportPipeline = request.app.state.pipeline
        try:
            return await pipeline.export_pptx(report_request)
        except ReportError as e:
            raise _report_failure(e, report_request.client_id)

    @app.post("/api/reports/export-pr-presence-pdf", response_model=ExportPayload)
    async def export_pr_presence_pdf(report_request: ReportRequest, request: Request):
        """Export the report as a vector-drawn PDF deck (base64 payload)."""
        pipeline: ReportPipeline = request.app.state.pipeline
        try:
            return await pipeline.export_pdf(report_request)
        except ReportError as e:
            raise _report_failure(e, report_request.client_id)

    # Error handlers
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Global exception handler."""
        logger.exception("Unhandled exception")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
