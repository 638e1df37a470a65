"""Tests for the vector PDF renderer."""

import pytest

from src.export.palette import BRAND_COLORS, Palette
from src.export.pdf_report import PDFReportRenderer
from src.export.slides_deck import SlideDeckCompiler
from src.models.slides import ChartElement, ImageElement, Slide, SlideDeck, SlideKind

from tests.test_vector import RecordingCanvas


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def renderer():
    return PDFReportRenderer()


@pytest.fixture
def deck(report_model):
    return SlideDeckCompiler().compile(report_model)


# ============================================================================
# Tests
# ============================================================================


class TestPDFReportRenderer:
    """Tests for PDFReportRenderer.render."""

    def test_renders_pdf_bytes(self, renderer, deck, report_model):
        document = renderer.render(deck, report_model)
        assert isinstance(document, bytes)
        assert document.startswith(b"%PDF-")

    def test_one_page_per_slide(self, renderer, deck, report_model):
        document = renderer.render(deck, report_model)
        assert f"/Count {len(deck.slides)}".encode() in document

    def test_empty_model_renders(self, renderer, empty_report_model):
        deck = SlideDeckCompiler().compile(empty_report_model)
        document = renderer.render(deck, empty_report_model)
        assert document.startswith(b"%PDF-")

    def test_empty_model_draws_placeholder_for_every_chart(self, renderer, empty_report_model):
        deck = SlideDeckCompiler().compile(empty_report_model)
        datasets = empty_report_model.datasets()
        charts = [e for s in deck.slides for e in s.elements if isinstance(e, ChartElement)]
        assert charts

        for element in charts:
            canvas = RecordingCanvas()
            renderer._render_chart(canvas, element, datasets[element.dataset_key])
            assert "No data available" in canvas.texts, element.dataset_key
            assert canvas.triangles == [], element.dataset_key

    def test_custom_palette_and_segments(self, deck, report_model):
        palette = Palette(colors={**BRAND_COLORS, "brand": (10, 20, 30)})
        document = PDFReportRenderer(palette, segments=12).render(deck, report_model)
        assert document.startswith(b"%PDF-")

    def test_missing_image_is_skipped(self, renderer, report_model):
        slide = Slide(
            id="logo",
            kind=SlideKind.CONTENT,
            elements=[ImageElement(path="/nonexistent/logo.png", position={"x": 10, "y": 10}, size={"w": 50, "h": 50})],
        )
        deck = SlideDeck(version="1.0", title="Logo", slides=[slide])
        assert renderer.render(deck, report_model).startswith(b"%PDF-")

    def test_render_is_deterministic_in_size(self, renderer, deck, report_model):
        first = renderer.render(deck, report_model)
        second = renderer.render(deck, report_model)
        assert len(first) == len(second)
