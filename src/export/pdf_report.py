"""PDF Report Renderer using fpdf2.

Draws a SlideDeck onto 960x540 pt pages. The logical slide canvas maps 1:1
onto page points, so element geometry is used as-is. Charts are drawn from
vector primitives (see src.export.vector).
"""

import logging
import math
import os
from typing import Dict, List

from fpdf import FPDF

from src.export.palette import DEFAULT_PALETTE, Palette
from src.export.slides_deck import HEADER_HEIGHT
from src.export.utils import sanitize_text
from src.export.vector import (
    DEFAULT_SEGMENTS,
    VectorCanvas,
    draw_bar_chart,
    draw_pie_chart,
    draw_placeholder,
    draw_ring_gauge,
    draw_word_cloud,
)
from src.models.schemas import Dataset, ReportModel
from src.models.slides import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    ChartElement,
    ChartType,
    ImageElement,
    KpiElement,
    LegendPosition,
    Slide,
    SlideDeck,
    SlideKind,
    TableElement,
    TextElement,
    TitleElement,
)

logger = logging.getLogger(__name__)

DONUT_HOLE_RATIO = 0.55
LEGEND_ROW_HEIGHT = 15
CHART_TITLE_SPACE = 18


class PDFReportRenderer:
    """
    Render a SlideDeck to PDF bytes.

    Uses fpdf2 for pure-Python PDF generation. One page per slide.
    """

    def __init__(self, palette: Palette = DEFAULT_PALETTE, segments: int = DEFAULT_SEGMENTS):
        self.palette = palette
        self.segments = segments

    def render(self, deck: SlideDeck, model: ReportModel) -> bytes:
        """
        Render every slide of the deck.

        Args:
            deck: Compiled slide deck.
            model: Report model providing the datasets referenced by the deck.

        Returns:
            PDF file contents as bytes.
        """
        datasets = model.datasets()
        pdf = self._create_pdf(deck)
        canvas = VectorCanvas(pdf)
        for slide in deck.slides:
            pdf.add_page()
            self._render_slide(canvas, slide, datasets)
        logger.info(f"Rendered PDF with {len(deck.slides)} pages for {model.client_id}")
        return bytes(pdf.output())

    def _create_pdf(self, deck: SlideDeck) -> FPDF:
        """Create and configure a new FPDF instance sized to the slide canvas."""
        pdf = FPDF(orientation="P", unit="pt", format=(CANVAS_WIDTH, CANVAS_HEIGHT))
        pdf.set_auto_page_break(auto=False)
        pdf.set_margins(0, 0, 0)
        pdf.set_title(sanitize_text(deck.title))
        pdf.set_creator(f"PR Presence deck v{deck.version}")
        return pdf

    def _render_slide(self, canvas: VectorCanvas, slide: Slide, datasets: Dict[str, Dataset]):
        """Background, header band, then elements in order."""
        canvas.fill_rect(0, 0, CANVAS_WIDTH, CANVAS_HEIGHT, self.palette.rgb(slide.background))
        if slide.kind == SlideKind.CONTENT:
            canvas.fill_rect(0, 0, CANVAS_WIDTH, HEADER_HEIGHT, self.palette.rgb("brand"))

        for element in slide.elements:
            if isinstance(element, TitleElement):
                self._render_title(canvas, element)
            elif isinstance(element, TextElement):
                self._render_text(canvas, element)
            elif isinstance(element, ChartElement):
                self._render_chart(canvas, element, datasets[element.dataset_key])
            elif isinstance(element, KpiElement):
                self._render_kpi(canvas, element, datasets[element.dataset_key])
            elif isinstance(element, TableElement):
                self._render_table(canvas, element)
            elif isinstance(element, ImageElement):
                self._render_image(canvas, element)

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _anchor_x(self, x: float, w: float, align: str) -> float:
        if align == "center":
            return x + w / 2
        if align == "right":
            return x + w
        return x

    def _render_title(self, canvas: VectorCanvas, element: TitleElement):
        """Bold title lines, vertically centred in the element box."""
        lines = element.text.split("\n")
        line_height = element.font_size * 1.2
        block = line_height * len(lines)
        top = element.position.y + (element.size.h - block) / 2 + element.font_size
        canvas.text_lines(
            self._anchor_x(element.position.x, element.size.w, element.align),
            top,
            lines,
            element.font_size,
            self.palette.rgb(element.color),
            align=element.align,
            bold=True,
            line_height=line_height,
        )

    def _render_text(self, canvas: VectorCanvas, element: TextElement):
        """Wrapped paragraphs; one paragraph per line entry."""
        size = element.font_size
        line_height = size * 1.4
        x = self._anchor_x(element.position.x, element.size.w, element.align)
        y = element.position.y + size
        bottom = element.position.y + element.size.h

        canvas.set_font(size, element.bold)
        for i, line in enumerate(element.lines):
            color_name = element.color
            if element.alternate_color and i % 2 == 1:
                color_name = element.alternate_color
            text = f"{element.bullet}  {line}" if element.bullet and line else line
            wrapped = canvas.wrap(text, element.size.w) if text else [""]
            for part in wrapped:
                if y > bottom + size:
                    return
                canvas.text(x, y, part, size, self.palette.rgb(color_name), align=element.align, bold=element.bold)
                y += line_height
            if element.bullet or element.alternate_color:
                y += size * 0.6

    # ------------------------------------------------------------------
    # Charts
    # ------------------------------------------------------------------

    def _render_chart(self, canvas: VectorCanvas, element: ChartElement, dataset: Dataset):
        x, y = element.position.x, element.position.y
        w, h = element.size.w, element.size.h
        colors = self.palette.colors_for(element.dataset_key)

        if element.title:
            canvas.text(x + w / 2, y + 12, element.title, 10, self.palette.rgb("ink"), align="center", bold=True)
            y += CHART_TITLE_SPACE
            h -= CHART_TITLE_SPACE

        if element.chart_type in (ChartType.COLUMN, ChartType.BAR):
            draw_bar_chart(
                canvas, dataset, x, y, w, h, colors,
                show_values=element.show_values,
                font_size=element.font_size,
            )
        elif element.chart_type in (ChartType.PIE, ChartType.DONUT):
            self._render_pie(canvas, element, dataset, x, y, w, h, colors)
        elif element.chart_type == ChartType.WORD_CLOUD:
            draw_word_cloud(canvas, dataset, x, y, w, h, colors)
        else:
            draw_placeholder(canvas, x, y, w, h)

    def _render_pie(self, canvas, element: ChartElement, dataset: Dataset, x, y, w, h, colors):
        show_legend = element.legend != LegendPosition.NONE
        legend_height = 0
        if show_legend:
            legend_height = 25 + math.ceil(len(dataset.labels) / 2) * LEGEND_ROW_HEIGHT
        radius = max(min(w / 2, (h - legend_height) / 2) - 10, 20)
        draw_pie_chart(
            canvas,
            dataset,
            x + w / 2,
            y + radius + 10,
            radius,
            colors,
            segments=self.segments,
            hole_ratio=DONUT_HOLE_RATIO if element.chart_type == ChartType.DONUT else 0.0,
            show_legend=show_legend,
            font_size=element.font_size,
        )

    def _render_kpi(self, canvas: VectorCanvas, element: KpiElement, dataset: Dataset):
        """Ring gauge with the point's value, its share of the dataset as the fill."""
        points = dataset.points()
        value = points[element.index].value if element.index < len(points) else 0
        total = sum(p.value for p in points)

        x, y, w = element.position.x, element.position.y, element.size.w
        cx, cy = x + w / 2, y + 60
        draw_ring_gauge(
            canvas, value, total, cx, cy, 55, 45,
            self.palette.rgb(element.color), self.palette.rgb("track"),
        )
        ink = self.palette.rgb("ink")
        canvas.text(cx, cy + 8, f"{value:,.0f}", 24, ink, align="center", bold=True)
        canvas.text(cx, cy + 85, element.label, 12, ink, align="center", bold=True)
        if element.caption:
            canvas.set_font(8)
            lines = canvas.wrap(element.caption, w)
            canvas.text_lines(cx, cy + 105, lines, 8, self.palette.rgb("muted"), align="center")

    # ------------------------------------------------------------------
    # Tables and images
    # ------------------------------------------------------------------

    def _render_table(self, canvas: VectorCanvas, element: TableElement):
        """Header row on the brand colour, body rows striped."""
        columns = max(len(element.headers), 1)
        col_w = element.size.w / columns
        row_h = element.font_size * 2
        x, y = element.position.x, element.position.y

        canvas.fill_rect(x, y, element.size.w, row_h, self.palette.rgb("brand"))
        for c, header in enumerate(element.headers):
            canvas.text(x + c * col_w + 4, y + row_h * 0.65, header, element.font_size,
                        self.palette.rgb("inverse"), bold=True)

        rows: List[List[str]] = element.rows
        for r, row in enumerate(rows, start=1):
            ry = y + r * row_h
            if ry + row_h > element.position.y + element.size.h:
                break
            if r % 2 == 0:
                canvas.fill_rect(x, ry, element.size.w, row_h, self.palette.rgb("track"))
            for c, cell in enumerate(row[:columns]):
                canvas.text(x + c * col_w + 4, ry + row_h * 0.65, cell, element.font_size, self.palette.rgb("ink"))

    def _render_image(self, canvas: VectorCanvas, element: ImageElement):
        if not os.path.exists(element.path):
            logger.warning(f"Image not found, skipping: {element.path}")
            return
        canvas.pdf.image(
            element.path,
            x=element.position.x,
            y=element.position.y,
            w=element.size.w,
            h=element.size.h,
            keep_aspect_ratio=True,
        )
