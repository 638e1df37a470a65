"""Vector drawing primitives and charts for the PDF renderer.

PDF pages have no chart objects, so charts are built here from filled
rectangles and triangles. Curved shapes are triangle fans: an arc between two
angles is split into equal angular subdivisions, each drawn as one triangle
from the centre to two edge points. The subdivision count is the
accuracy/speed knob.

Angles are in radians on page coordinates (y grows downward), so increasing
angles run clockwise and ``-pi/2`` is 12 o'clock.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from fpdf import FPDF

from src.analytics.engine import round_half_up
from src.export.palette import RGB
from src.export.utils import NO_DATA_TEXT, sanitize_text, wrap_text
from src.models.schemas import DataPoint, Dataset

Point = Tuple[float, float]
Triangle = Tuple[Point, Point, Point]

PIE_START_ANGLE = -math.pi / 2
DEFAULT_SEGMENTS = 50
LABEL_RADIUS_RATIO = 0.7
MIN_LABEL_SHARE = 0.05
BAR_GUTTER = 10.0
BAR_LABEL_SPACE = 40.0

WHITE: RGB = (255, 255, 255)
DARK_TEXT: RGB = (51, 51, 51)
GRAY_TEXT: RGB = (102, 102, 102)
PLACEHOLDER_FILL: RGB = (243, 244, 246)
PLACEHOLDER_TEXT: RGB = (153, 153, 153)


# ============================================================================
# Geometry
# ============================================================================


def point_on_circle(cx: float, cy: float, radius: float, angle: float) -> Point:
    return (cx + radius * math.cos(angle), cy + radius * math.sin(angle))


def arc_fan(
    cx: float,
    cy: float,
    radius: float,
    start: float,
    end: float,
    segments: int = DEFAULT_SEGMENTS,
) -> List[Triangle]:
    """Approximate a filled circular sector with ``segments`` triangles."""
    if segments < 1 or end <= start:
        return []
    step = (end - start) / segments
    triangles = []
    for j in range(segments):
        a1 = start + step * j
        a2 = end if j == segments - 1 else start + step * (j + 1)
        triangles.append((
            (cx, cy),
            point_on_circle(cx, cy, radius, a1),
            point_on_circle(cx, cy, radius, a2),
        ))
    return triangles


def ring_segment(
    cx: float,
    cy: float,
    inner: float,
    outer: float,
    start: float,
    end: float,
    segments: int = DEFAULT_SEGMENTS,
) -> List[Triangle]:
    """Approximate an annular sector; each subdivision is a quad split in two triangles."""
    if segments < 1 or end <= start:
        return []
    step = (end - start) / segments
    triangles = []
    for j in range(segments):
        a1 = start + step * j
        a2 = end if j == segments - 1 else start + step * (j + 1)
        i1 = point_on_circle(cx, cy, inner, a1)
        o1 = point_on_circle(cx, cy, outer, a1)
        o2 = point_on_circle(cx, cy, outer, a2)
        i2 = point_on_circle(cx, cy, inner, a2)
        triangles.append((i1, o1, o2))
        triangles.append((i1, o2, i2))
    return triangles


@dataclass(frozen=True)
class SliceGeometry:
    """Angular extent of one pie slice."""

    index: int
    label: str
    value: float
    start: float
    end: float
    share: float

    @property
    def span(self) -> float:
        return self.end - self.start

    @property
    def mid_angle(self) -> float:
        return self.start + self.span / 2

    @property
    def show_label(self) -> bool:
        """Labels on slices under 5% would overlap at slide resolution."""
        return self.share >= MIN_LABEL_SHARE

    @property
    def percent_label(self) -> str:
        return f"{round_half_up(self.share * 100):.0f}%"

    def label_point(self, cx: float, cy: float, radius: float) -> Point:
        return point_on_circle(cx, cy, radius * LABEL_RADIUS_RATIO, self.mid_angle)


def pie_slices(points: Sequence[DataPoint], start_angle: float = PIE_START_ANGLE) -> List[SliceGeometry]:
    """
    Lay slices out clockwise from 12 o'clock.

    Each span is ``value / total * 2pi``. The last slice closes the circle
    exactly. Returns an empty list when the total is not positive.
    """
    total = sum(max(p.value, 0) for p in points)
    if total <= 0:
        return []

    slices = []
    angle = start_angle
    full_turn = start_angle + 2 * math.pi
    for i, point in enumerate(points):
        share = max(point.value, 0) / total
        end = full_turn if i == len(points) - 1 else angle + share * 2 * math.pi
        slices.append(SliceGeometry(i, point.label, point.value, angle, end, share))
        angle = end
    return slices


@dataclass(frozen=True)
class BarGeometry:
    index: int
    label: str
    value: float
    x: float
    y: float
    width: float
    height: float

    @property
    def baseline(self) -> float:
        return self.y + self.height


def bar_layout(
    values: Sequence[float],
    labels: Sequence[str],
    x: float,
    y: float,
    width: float,
    height: float,
    gutter: float = BAR_GUTTER,
    label_space: float = BAR_LABEL_SPACE,
) -> List[BarGeometry]:
    """
    Place bars on a shared baseline.

    ``bar_width = (width - total_gutter) / n`` with a gutter before, between
    and after the bars. Heights scale linearly against ``max(values, 1)``.
    """
    n = len(values)
    if n == 0:
        return []
    chart_height = height - label_space
    bar_width = max((width - gutter * (n + 1)) / n, 1.0)
    max_value = max(max(values), 1)
    baseline = y + chart_height

    bars = []
    for i, (label, value) in enumerate(zip(labels, values)):
        bar_height = max(value, 0) / max_value * chart_height
        bar_x = x + gutter + i * (bar_width + gutter)
        bars.append(BarGeometry(i, label, value, bar_x, baseline - bar_height, bar_width, bar_height))
    return bars


# ============================================================================
# Canvas
# ============================================================================


class VectorCanvas:
    """Thin drawing surface over an FPDF page using primitive shapes only."""

    def __init__(self, pdf: FPDF, font_family: str = "Helvetica"):
        self.pdf = pdf
        self.font_family = font_family

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGB) -> None:
        if w <= 0 or h <= 0:
            return
        self.pdf.set_fill_color(*color)
        self.pdf.rect(x, y, w, h, style="F")

    def fill_triangle(self, triangle: Triangle, color: RGB) -> None:
        self.pdf.set_fill_color(*color)
        self.pdf.polygon(list(triangle), style="F")

    def fill_triangles(self, triangles: Sequence[Triangle], color: RGB) -> None:
        for triangle in triangles:
            self.fill_triangle(triangle, color)

    def set_font(self, size: float, bold: bool = False) -> None:
        self.pdf.set_font(self.font_family, "B" if bold else "", size)

    def measure(self, text: str) -> float:
        return self.pdf.get_string_width(sanitize_text(text))

    def wrap(self, text: str, width: float) -> List[str]:
        return wrap_text(sanitize_text(text), width, self.pdf.get_string_width)

    def text(
        self,
        x: float,
        y: float,
        text: str,
        size: float,
        color: RGB,
        align: str = "left",
        bold: bool = False,
    ) -> None:
        """Draw one line with its baseline at ``y``; ``x`` is the anchor for ``align``."""
        text = sanitize_text(text)
        self.set_font(size, bold)
        self.pdf.set_text_color(*color)
        if align == "center":
            x -= self.pdf.get_string_width(text) / 2
        elif align == "right":
            x -= self.pdf.get_string_width(text)
        self.pdf.text(x, y, text)

    def text_lines(
        self,
        x: float,
        y: float,
        lines: Sequence[str],
        size: float,
        color: RGB,
        align: str = "left",
        bold: bool = False,
        line_height: Optional[float] = None,
    ) -> float:
        """Draw lines top-down; returns the y after the last line."""
        step = line_height or size * 1.3
        for line in lines:
            self.text(x, y, line, size, color, align=align, bold=bold)
            y += step
        return y


# ============================================================================
# Charts
# ============================================================================


def draw_placeholder(
    canvas: VectorCanvas,
    x: float,
    y: float,
    w: float,
    h: float,
    text: str = NO_DATA_TEXT,
) -> None:
    """Neutral box shown instead of a chart with nothing to draw."""
    canvas.fill_rect(x, y, w, h, PLACEHOLDER_FILL)
    canvas.text(x + w / 2, y + h / 2, text, 12, PLACEHOLDER_TEXT, align="center")


def draw_bar_chart(
    canvas: VectorCanvas,
    dataset: Dataset,
    x: float,
    y: float,
    width: float,
    height: float,
    colors: Sequence[RGB],
    show_values: bool = True,
    font_size: float = 9,
) -> List[BarGeometry]:
    """
    Draw a column chart; multi-series datasets are stacked per label.

    Single-series bars cycle through ``colors`` per bar, stacked segments use
    one colour per series.

    Returns:
        Bar geometry (totals), or an empty list when a placeholder was drawn.
    """
    if dataset.is_empty:
        draw_placeholder(canvas, x, y, width, height)
        return []

    totals = [sum(s.values[i] for s in dataset.series) for i in range(len(dataset.labels))]
    bars = bar_layout(totals, dataset.labels, x, y, width, height)
    stacked = len(dataset.series) > 1

    for bar in bars:
        if stacked:
            top = bar.baseline
            for s_index, series in enumerate(dataset.series):
                value = series.values[bar.index]
                segment = bar.height * (value / bar.value) if bar.value else 0
                top -= segment
                canvas.fill_rect(bar.x, top, bar.width, segment, colors[s_index % len(colors)])
        else:
            canvas.fill_rect(bar.x, bar.y, bar.width, bar.height, colors[bar.index % len(colors)])

        center = bar.x + bar.width / 2
        if show_values:
            canvas.text(center, bar.y - 5, f"{bar.value:g}", font_size, DARK_TEXT, align="center")

        canvas.set_font(font_size - 1)
        label_lines = canvas.wrap(bar.label, bar.width + 5)
        canvas.text_lines(center, bars[0].baseline + 10, label_lines[:3], font_size - 1, GRAY_TEXT, align="center")

    if stacked:
        _draw_series_legend(canvas, dataset, x + width, y, colors, font_size - 1)
    return bars


def _draw_series_legend(
    canvas: VectorCanvas,
    dataset: Dataset,
    right: float,
    top: float,
    colors: Sequence[RGB],
    font_size: float,
) -> None:
    ly = top
    for i, series in enumerate(dataset.series):
        canvas.set_font(font_size)
        text_w = canvas.measure(series.name)
        lx = right - text_w - 15
        canvas.fill_rect(lx, ly - 6, 8, 8, colors[i % len(colors)])
        canvas.text(lx + 12, ly + 1, series.name, font_size, DARK_TEXT)
        ly += 12


def draw_pie_chart(
    canvas: VectorCanvas,
    dataset: Dataset,
    cx: float,
    cy: float,
    radius: float,
    colors: Sequence[RGB],
    segments: int = DEFAULT_SEGMENTS,
    hole_ratio: float = 0.0,
    show_legend: bool = True,
    font_size: float = 10,
) -> List[SliceGeometry]:
    """
    Draw a pie (or donut when ``hole_ratio`` > 0) from triangle fans.

    Percentage labels sit at 70% of the radius on each slice's bisector and
    are skipped for slices under 5%. The legend is a two-column grid below.

    Returns:
        Slice geometry, or an empty list when a placeholder was drawn.
    """
    slices = pie_slices(dataset.points())
    if dataset.is_empty or not slices:
        draw_placeholder(canvas, cx - radius, cy - radius, radius * 2, radius * 2)
        return []

    for s in slices:
        color = colors[s.index % len(colors)]
        if hole_ratio > 0:
            triangles = ring_segment(cx, cy, radius * hole_ratio, radius, s.start, s.end, segments)
        else:
            triangles = arc_fan(cx, cy, radius, s.start, s.end, segments)
        canvas.fill_triangles(triangles, color)

    for s in slices:
        if s.show_label:
            lx, ly = s.label_point(cx, cy, radius)
            canvas.text(lx, ly + font_size / 3, s.percent_label, font_size, WHITE, align="center")

    if show_legend:
        legend_y = cy + radius + 20
        for s in slices:
            color = colors[s.index % len(colors)]
            lx = cx - radius + (s.index % 2) * (radius + 20)
            ly = legend_y + (s.index // 2) * 15
            canvas.fill_rect(lx, ly - 5, 10, 10, color)
            canvas.text(lx + 15, ly + 3, s.label, font_size - 2, DARK_TEXT)
    return slices


def draw_ring_gauge(
    canvas: VectorCanvas,
    value: float,
    total: float,
    cx: float,
    cy: float,
    outer: float,
    inner: float,
    color: RGB,
    track: RGB,
    segments: int = 60,
) -> float:
    """
    Draw a full ring track with the ``value / total`` portion filled.

    Returns:
        The filled fraction in [0, 1].
    """
    fraction = min(max(value / total, 0.0), 1.0) if total > 0 else 0.0
    full = PIE_START_ANGLE + 2 * math.pi
    canvas.fill_triangles(ring_segment(cx, cy, inner, outer, PIE_START_ANGLE, full, segments), track)
    if fraction > 0:
        filled = max(1, round(segments * fraction))
        end = PIE_START_ANGLE + fraction * 2 * math.pi
        canvas.fill_triangles(ring_segment(cx, cy, inner, outer, PIE_START_ANGLE, end, filled), color)
    return fraction


def word_cloud_layout(count: int, cx: float, cy: float) -> List[Point]:
    """Deterministic spiral positions around a centre point."""
    positions = []
    for i in range(count):
        angle = (i / max(count, 1)) * math.pi * 4
        radius = 50 + i * 15
        positions.append((
            cx + math.cos(angle + i * 0.5) * radius * 0.8,
            cy + math.sin(angle + i * 0.3) * radius * 0.5 - 20,
        ))
    return positions


def draw_word_cloud(
    canvas: VectorCanvas,
    dataset: Dataset,
    x: float,
    y: float,
    width: float,
    height: float,
    colors: Sequence[RGB],
    max_words: int = 20,
) -> int:
    """
    Draw keywords sized and tinted by weight (series 0).

    Returns:
        Number of words drawn (0 when a placeholder was drawn).
    """
    if dataset.is_empty:
        draw_placeholder(canvas, x, y, width, height)
        return 0

    points = dataset.points()[:max_words]
    max_weight = max(max(p.value for p in points), 1)
    positions = word_cloud_layout(len(points), x + width / 2, y + height / 2)
    for point, (px, py) in zip(points, positions):
        ratio = point.value / max_weight
        size = round(12 + ratio * 22)
        tier = 0 if ratio > 0.6 else 1 if ratio > 0.3 else 2
        canvas.text(px, py, point.label, size, colors[tier % len(colors)], align="center")
    return len(points)
