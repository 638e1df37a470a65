"""PPTX Deck Renderer using python-pptx.

Renders a SlideDeck with native, editable PowerPoint charts. The 960x540
logical canvas maps onto a 13.333in x 7.5in slide, so one canvas unit is
exactly one point.
"""

import logging
import os
from io import BytesIO
from typing import Dict, Sequence

from pptx import Presentation
from pptx.chart.data import CategoryChartData
from pptx.dml.color import RGBColor
from pptx.enum.chart import XL_CHART_TYPE, XL_LABEL_POSITION, XL_LEGEND_POSITION
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Pt

from src.export.palette import DEFAULT_PALETTE, RGB, Palette
from src.export.slides_deck import HEADER_HEIGHT
from src.export.utils import NO_DATA_TEXT
from src.export.vector import word_cloud_layout
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

FONT_FACE = "Arial"
BLANK_LAYOUT = 6

CHART_TYPES = {
    ChartType.COLUMN: XL_CHART_TYPE.COLUMN_CLUSTERED,
    ChartType.BAR: XL_CHART_TYPE.BAR_CLUSTERED,
    ChartType.PIE: XL_CHART_TYPE.PIE,
    ChartType.DONUT: XL_CHART_TYPE.DOUGHNUT,
}

LEGEND_POSITIONS = {
    LegendPosition.TOP: XL_LEGEND_POSITION.TOP,
    LegendPosition.BOTTOM: XL_LEGEND_POSITION.BOTTOM,
    LegendPosition.RIGHT: XL_LEGEND_POSITION.RIGHT,
}

ALIGNMENTS = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
}


def _rgb(color: RGB) -> RGBColor:
    return RGBColor(*color)


class PptxDeckRenderer:
    """
    Render a SlideDeck to PPTX bytes.

    Charts are native chart objects so the recipient can edit the data.
    """

    def __init__(self, palette: Palette = DEFAULT_PALETTE):
        self.palette = palette

    def render(self, deck: SlideDeck, model: ReportModel) -> bytes:
        """
        Render every slide of the deck.

        Args:
            deck: Compiled slide deck.
            model: Report model providing the datasets referenced by the deck.

        Returns:
            PPTX file contents as bytes.
        """
        datasets = model.datasets()
        prs = Presentation()
        prs.slide_width = Pt(CANVAS_WIDTH)
        prs.slide_height = Pt(CANVAS_HEIGHT)
        prs.core_properties.title = deck.title
        prs.core_properties.subject = f"PR Presence deck v{deck.version}"

        for slide in deck.slides:
            self._render_slide(prs, slide, datasets)

        buffer = BytesIO()
        prs.save(buffer)
        logger.info(f"Rendered PPTX with {len(deck.slides)} slides for {model.client_id}")
        return buffer.getvalue()

    def _render_slide(self, prs, slide: Slide, datasets: Dict[str, Dataset]):
        pptx_slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT])
        background = pptx_slide.background.fill
        background.solid()
        background.fore_color.rgb = _rgb(self.palette.rgb(slide.background))

        if slide.kind == SlideKind.CONTENT:
            self._add_rect(pptx_slide, 0, 0, CANVAS_WIDTH, HEADER_HEIGHT, self.palette.rgb("brand"))

        for element in slide.elements:
            if isinstance(element, TitleElement):
                self._render_title(pptx_slide, element)
            elif isinstance(element, TextElement):
                self._render_text(pptx_slide, element)
            elif isinstance(element, ChartElement):
                self._render_chart(pptx_slide, element, datasets[element.dataset_key])
            elif isinstance(element, KpiElement):
                self._render_kpi(pptx_slide, element, datasets[element.dataset_key])
            elif isinstance(element, TableElement):
                self._render_table(pptx_slide, element)
            elif isinstance(element, ImageElement):
                self._render_image(pptx_slide, element)

    # ------------------------------------------------------------------
    # Shapes and text
    # ------------------------------------------------------------------

    def _add_rect(self, pptx_slide, x, y, w, h, color: RGB):
        shape = pptx_slide.shapes.add_shape(MSO_SHAPE.RECTANGLE, Pt(x), Pt(y), Pt(w), Pt(h))
        shape.fill.solid()
        shape.fill.fore_color.rgb = _rgb(color)
        shape.line.fill.background()
        return shape

    def _add_textbox(self, pptx_slide, x, y, w, h):
        box = pptx_slide.shapes.add_textbox(Pt(x), Pt(y), Pt(w), Pt(h))
        frame = box.text_frame
        frame.word_wrap = True
        return frame

    def _style_run(self, run, size: float, color: RGB, bold: bool = False):
        run.font.name = FONT_FACE
        run.font.size = Pt(size)
        run.font.bold = bold
        run.font.color.rgb = _rgb(color)

    def _render_title(self, pptx_slide, element: TitleElement):
        frame = self._add_textbox(
            pptx_slide, element.position.x, element.position.y, element.size.w, element.size.h
        )
        frame.vertical_anchor = MSO_ANCHOR.MIDDLE
        for i, line in enumerate(element.text.split("\n")):
            paragraph = frame.paragraphs[0] if i == 0 else frame.add_paragraph()
            paragraph.alignment = ALIGNMENTS[element.align]
            run = paragraph.add_run()
            run.text = line
            self._style_run(run, element.font_size, self.palette.rgb(element.color), bold=True)

    def _render_text(self, pptx_slide, element: TextElement):
        frame = self._add_textbox(
            pptx_slide, element.position.x, element.position.y, element.size.w, element.size.h
        )
        for i, line in enumerate(element.lines):
            paragraph = frame.paragraphs[0] if i == 0 else frame.add_paragraph()
            paragraph.alignment = ALIGNMENTS[element.align]
            if element.bullet or element.alternate_color:
                paragraph.space_after = Pt(element.font_size * 0.6)
            color_name = element.color
            if element.alternate_color and i % 2 == 1:
                color_name = element.alternate_color
            run = paragraph.add_run()
            run.text = f"{element.bullet}  {line}" if element.bullet and line else line
            self._style_run(run, element.font_size, self.palette.rgb(color_name), bold=element.bold)

    def _render_placeholder(self, pptx_slide, x, y, w, h):
        """Neutral box shown instead of a chart with nothing to draw."""
        shape = self._add_rect(pptx_slide, x, y, w, h, (243, 244, 246))
        frame = shape.text_frame
        frame.vertical_anchor = MSO_ANCHOR.MIDDLE
        paragraph = frame.paragraphs[0]
        paragraph.alignment = PP_ALIGN.CENTER
        run = paragraph.add_run()
        run.text = NO_DATA_TEXT
        self._style_run(run, 12, self.palette.rgb("subtle"))

    # ------------------------------------------------------------------
    # Charts
    # ------------------------------------------------------------------

    def _render_chart(self, pptx_slide, element: ChartElement, dataset: Dataset):
        x, y = element.position.x, element.position.y
        w, h = element.size.w, element.size.h

        if dataset.is_empty:
            self._render_placeholder(pptx_slide, x, y, w, h)
            return
        if element.chart_type == ChartType.WORD_CLOUD:
            self._render_word_cloud(pptx_slide, element, dataset)
            return

        chart_data = CategoryChartData()
        chart_data.categories = dataset.labels
        for series in dataset.series:
            chart_data.add_series(series.name, series.values)

        frame = pptx_slide.shapes.add_chart(
            CHART_TYPES[element.chart_type], Pt(x), Pt(y), Pt(w), Pt(h), chart_data
        )
        chart = frame.chart
        chart.font.name = FONT_FACE
        chart.font.size = Pt(element.font_size)

        if element.title:
            chart.has_title = True
            chart.chart_title.text_frame.text = element.title
        else:
            chart.has_title = False

        if element.legend == LegendPosition.NONE:
            chart.has_legend = False
        else:
            chart.has_legend = True
            chart.legend.position = LEGEND_POSITIONS[element.legend]
            chart.legend.include_in_layout = False

        colors = self.palette.colors_for(element.dataset_key)
        self._apply_colors(chart, element.chart_type, dataset, colors)
        self._apply_data_labels(chart, element)

        if element.chart_type in (ChartType.COLUMN, ChartType.BAR):
            value_axis = chart.value_axis
            value_axis.has_major_gridlines = False
            value_axis.visible = False
            if element.chart_type == ChartType.BAR:
                # Rank order top-down
                chart.category_axis.reverse_order = True

    def _apply_colors(self, chart, chart_type: ChartType, dataset: Dataset, colors: Sequence[RGB]):
        """Per-point colours for pies and single-series bars, per-series otherwise."""
        plot = chart.plots[0]
        per_point = chart_type in (ChartType.PIE, ChartType.DONUT) or (
            len(dataset.series) == 1 and len(colors) > 1
        )
        if per_point:
            plot.vary_by_categories = True
            series = plot.series[0]
            for i in range(len(dataset.labels)):
                fill = series.points[i].format.fill
                fill.solid()
                fill.fore_color.rgb = _rgb(colors[i % len(colors)])
        else:
            plot.vary_by_categories = False
            for i, series in enumerate(plot.series):
                series.format.fill.solid()
                series.format.fill.fore_color.rgb = _rgb(colors[i % len(colors)])

    def _apply_data_labels(self, chart, element: ChartElement):
        plot = chart.plots[0]
        if not (element.show_values or element.show_percent):
            plot.has_data_labels = False
            return
        plot.has_data_labels = True
        labels = plot.data_labels
        labels.font.size = Pt(element.font_size)
        if element.chart_type in (ChartType.PIE, ChartType.DONUT) and element.show_percent:
            labels.show_percentage = True
            labels.show_value = False
            labels.number_format = "0%"
            labels.number_format_is_linked = False
        else:
            labels.show_value = element.show_values
            if element.chart_type in (ChartType.COLUMN, ChartType.BAR):
                labels.position = XL_LABEL_POSITION.OUTSIDE_END

    def _render_word_cloud(self, pptx_slide, element: ChartElement, dataset: Dataset, max_words: int = 20):
        """Keywords as text boxes sized and tinted by weight, on the same spiral as the PDF."""
        x, y = element.position.x, element.position.y
        w, h = element.size.w, element.size.h
        colors = self.palette.colors_for(element.dataset_key)
        points = dataset.points()[:max_words]
        max_weight = max(max(p.value for p in points), 1)
        positions = word_cloud_layout(len(points), x + w / 2, y + h / 2)

        for point, (px, py) in zip(points, positions):
            ratio = point.value / max_weight
            size = round(12 + ratio * 22)
            tier = 0 if ratio > 0.6 else 1 if ratio > 0.3 else 2
            box_w = len(point.label) * size * 0.6 + 20
            box_h = size * 1.6
            left = min(max(px - box_w / 2, 0), CANVAS_WIDTH - box_w)
            top = min(max(py - size, 0), CANVAS_HEIGHT - box_h)
            frame = self._add_textbox(pptx_slide, left, top, box_w, box_h)
            frame.word_wrap = False
            paragraph = frame.paragraphs[0]
            paragraph.alignment = PP_ALIGN.CENTER
            run = paragraph.add_run()
            run.text = point.label
            self._style_run(run, size, colors[tier % len(colors)], bold=ratio > 0.6)

    def _render_kpi(self, pptx_slide, element: KpiElement, dataset: Dataset):
        """Doughnut gauge with the point's value, its share of the dataset as the fill."""
        points = dataset.points()
        value = points[element.index].value if element.index < len(points) else 0
        total = sum(p.value for p in points)
        x, y, w = element.position.x, element.position.y, element.size.w
        ring = 120
        ring_x = x + (w - ring) / 2

        chart_data = CategoryChartData()
        chart_data.categories = ["value", "rest"]
        chart_data.add_series(element.label, [value, max(total - value, 0)] if total > 0 else [0, 1])
        chart = pptx_slide.shapes.add_chart(
            XL_CHART_TYPE.DOUGHNUT, Pt(ring_x), Pt(y), Pt(ring), Pt(ring), chart_data
        ).chart
        chart.has_legend = False
        chart.has_title = False
        series = chart.plots[0].series[0]
        for i, color in enumerate((self.palette.rgb(element.color), self.palette.rgb("track"))):
            fill = series.points[i].format.fill
            fill.solid()
            fill.fore_color.rgb = _rgb(color)

        ink = self.palette.rgb("ink")
        frame = self._add_textbox(pptx_slide, ring_x, y + ring / 2 - 20, ring, 40)
        frame.paragraphs[0].alignment = PP_ALIGN.CENTER
        run = frame.paragraphs[0].add_run()
        run.text = f"{value:,.0f}"
        self._style_run(run, 24, ink, bold=True)

        frame = self._add_textbox(pptx_slide, x, y + ring + 10, w, 30)
        frame.paragraphs[0].alignment = PP_ALIGN.CENTER
        run = frame.paragraphs[0].add_run()
        run.text = element.label
        self._style_run(run, 12, ink, bold=True)

        if element.caption:
            frame = self._add_textbox(pptx_slide, x, y + ring + 40, w, 100)
            frame.paragraphs[0].alignment = PP_ALIGN.CENTER
            run = frame.paragraphs[0].add_run()
            run.text = element.caption
            self._style_run(run, 8, self.palette.rgb("muted"))

    # ------------------------------------------------------------------
    # Tables and images
    # ------------------------------------------------------------------

    def _render_table(self, pptx_slide, element: TableElement):
        columns = max(len(element.headers), 1)
        table = pptx_slide.shapes.add_table(
            len(element.rows) + 1,
            columns,
            Pt(element.position.x),
            Pt(element.position.y),
            Pt(element.size.w),
            Pt(element.size.h),
        ).table

        for c, header in enumerate(element.headers):
            self._fill_cell(table.cell(0, c), header, element.font_size, self.palette.rgb("inverse"), bold=True)
            table.cell(0, c).fill.solid()
            table.cell(0, c).fill.fore_color.rgb = _rgb(self.palette.rgb("brand"))
        for r, row in enumerate(element.rows, start=1):
            for c, value in enumerate(row[:columns]):
                self._fill_cell(table.cell(r, c), value, element.font_size, self.palette.rgb("ink"))

    def _fill_cell(self, cell, text: str, size: float, color: RGB, bold: bool = False):
        paragraph = cell.text_frame.paragraphs[0]
        run = paragraph.add_run()
        run.text = text
        self._style_run(run, size, color, bold=bold)

    def _render_image(self, pptx_slide, element: ImageElement):
        if not os.path.exists(element.path):
            logger.warning(f"Image not found, skipping: {element.path}")
            return
        pptx_slide.shapes.add_picture(
            element.path,
            Pt(element.position.x),
            Pt(element.position.y),
            height=Pt(element.size.h),
        )
