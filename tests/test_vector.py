"""Tests for vector geometry and the primitive-based chart routines."""

import math

import pytest
from fpdf import FPDF

from src.export.vector import (
    PIE_START_ANGLE,
    VectorCanvas,
    arc_fan,
    bar_layout,
    draw_bar_chart,
    draw_pie_chart,
    draw_ring_gauge,
    draw_word_cloud,
    pie_slices,
    ring_segment,
    word_cloud_layout,
)
from src.models.schemas import DataPoint, Dataset, Series

RED = (255, 0, 0)
BLUE = (0, 0, 255)


# ============================================================================
# Test Fixtures
# ============================================================================


class RecordingCanvas(VectorCanvas):
    """VectorCanvas that also records the primitives it draws."""

    def __init__(self):
        pdf = FPDF(orientation="P", unit="pt", format=(960, 540))
        pdf.add_page()
        super().__init__(pdf)
        self.rects = []
        self.triangles = []
        self.texts = []

    def fill_rect(self, x, y, w, h, color):
        self.rects.append((x, y, w, h, color))
        super().fill_rect(x, y, w, h, color)

    def fill_triangle(self, triangle, color):
        self.triangles.append((triangle, color))
        super().fill_triangle(triangle, color)

    def text(self, x, y, text, size, color, align="left", bold=False):
        self.texts.append(text)
        super().text(x, y, text, size, color, align=align, bold=bold)


@pytest.fixture
def canvas():
    return RecordingCanvas()


def dataset(labels, *series_values, key="media_sources"):
    return Dataset(
        key=key,
        title="Test",
        labels=labels,
        series=[Series(name=f"S{i}", values=list(v)) for i, v in enumerate(series_values)],
    )


def points(*values):
    return [DataPoint(label=f"P{i}", value=v) for i, v in enumerate(values)]


# ============================================================================
# Geometry
# ============================================================================


class TestPieSlices:
    """Tests for pie slice angles."""

    @pytest.mark.parametrize("values", [(1,), (3, 1), (10, 20, 30, 40), (1, 1, 1), (0.1, 7, 3.3, 0, 5)])
    def test_angles_sum_to_full_turn(self, values):
        slices = pie_slices(points(*values))
        assert math.isclose(sum(s.span for s in slices), 2 * math.pi, rel_tol=0, abs_tol=1e-9)

    def test_starts_at_twelve_oclock_and_is_contiguous(self):
        slices = pie_slices(points(1, 2, 3))
        assert slices[0].start == PIE_START_ANGLE
        for previous, current in zip(slices, slices[1:]):
            assert current.start == previous.end
        assert slices[-1].end == pytest.approx(PIE_START_ANGLE + 2 * math.pi)

    def test_span_proportional_to_value(self):
        slices = pie_slices(points(1, 3))
        assert slices[0].span == pytest.approx(math.pi / 2)
        assert slices[1].span == pytest.approx(3 * math.pi / 2)

    def test_small_slices_hide_labels(self):
        slices = pie_slices(points(96, 4))
        assert slices[0].show_label
        assert not slices[1].show_label
        assert slices[0].percent_label == "96%"

    def test_percent_label_rounds_half_up(self):
        slices = pie_slices(points(1, 7))
        assert slices[0].percent_label == "13%"
        assert slices[1].percent_label == "88%"

    def test_label_point_at_70_percent_radius(self):
        s = pie_slices(points(1))[0]
        x, y = s.label_point(100, 100, 50)
        assert math.hypot(x - 100, y - 100) == pytest.approx(35)

    def test_zero_total_has_no_slices(self):
        assert pie_slices(points(0, 0)) == []
        assert pie_slices([]) == []


class TestFans:
    """Tests for triangle-fan approximations."""

    def test_arc_fan_segment_count(self):
        triangles = arc_fan(0, 0, 10, 0, math.pi, segments=50)
        assert len(triangles) == 50
        assert all(t[0] == (0, 0) for t in triangles)

    def test_arc_fan_endpoints_on_circle(self):
        triangles = arc_fan(0, 0, 10, 0, math.pi / 2, segments=4)
        assert triangles[0][1] == pytest.approx((10, 0))
        assert triangles[-1][2] == pytest.approx((0, 10), abs=1e-9)

    def test_ring_segment_two_triangles_per_step(self):
        assert len(ring_segment(0, 0, 5, 10, 0, math.pi, segments=12)) == 24

    def test_empty_arc(self):
        assert arc_fan(0, 0, 10, 1, 1) == []


class TestBarLayout:
    """Tests for bar placement."""

    def test_widths_and_gutters(self):
        bars = bar_layout([1, 2, 3, 4], ["a", "b", "c", "d"], x=0, y=0, width=450, height=240, gutter=10)
        assert all(b.width == pytest.approx(100) for b in bars)
        assert [b.x for b in bars] == pytest.approx([10, 120, 230, 340])

    def test_heights_scale_against_max(self):
        bars = bar_layout([5, 10], ["a", "b"], x=0, y=0, width=200, height=140, label_space=40)
        assert bars[1].height == pytest.approx(100)
        assert bars[0].height == pytest.approx(50)
        assert bars[0].baseline == pytest.approx(bars[1].baseline)

    def test_small_values_scale_against_one(self):
        bars = bar_layout([0.5], ["a"], x=0, y=0, width=100, height=140, label_space=40)
        assert bars[0].height == pytest.approx(50)

    def test_no_values(self):
        assert bar_layout([], [], 0, 0, 100, 100) == []


# ============================================================================
# Charts
# ============================================================================


class TestCharts:
    """Tests for the chart routines drawing onto a canvas."""

    def test_pie_draws_fifty_triangles_per_slice(self, canvas):
        slices = draw_pie_chart(canvas, dataset(["a", "b", "c"], [1, 2, 3]), 200, 200, 80, [RED, BLUE])
        assert len(slices) == 3
        assert len(canvas.triangles) == 150
        assert "50%" in canvas.texts
        assert "a" in canvas.texts

    def test_donut_uses_ring_segments(self, canvas):
        draw_pie_chart(canvas, dataset(["a", "b"], [1, 1]), 200, 200, 80, [RED], segments=10, hole_ratio=0.5)
        assert len(canvas.triangles) == 40

    def test_empty_pie_draws_placeholder(self, canvas):
        assert draw_pie_chart(canvas, dataset(["a", "b"], [0, 0]), 200, 200, 80, [RED]) == []
        assert canvas.triangles == []
        assert "No data available" in canvas.texts

    def test_bar_chart_values_and_labels(self, canvas):
        bars = draw_bar_chart(canvas, dataset(["Jan", "Feb"], [3, 7]), 0, 0, 300, 200, [RED, BLUE])
        assert len(bars) == 2
        assert [r[4] for r in canvas.rects] == [RED, BLUE]
        assert "3" in canvas.texts and "7" in canvas.texts
        assert "Jan" in canvas.texts

    def test_stacked_bars_use_series_colours(self, canvas):
        bars = draw_bar_chart(canvas, dataset(["Jan"], [1], [3]), 0, 0, 300, 200, [RED, BLUE])
        assert bars[0].value == 4
        drawn = [r for r in canvas.rects if r[4] in (RED, BLUE)]
        assert [r[4] for r in drawn[:2]] == [RED, BLUE]
        assert drawn[0][3] + drawn[1][3] == pytest.approx(bars[0].height)

    def test_empty_bar_chart_draws_placeholder(self, canvas):
        assert draw_bar_chart(canvas, dataset([], []), 0, 0, 300, 200, [RED]) == []
        assert "No data available" in canvas.texts

    def test_ring_gauge_fraction(self, canvas):
        assert draw_ring_gauge(canvas, 1, 4, 100, 100, 50, 40, RED, BLUE) == 0.25
        assert draw_ring_gauge(canvas, 0, 0, 100, 100, 50, 40, RED, BLUE) == 0.0

    def test_word_cloud(self, canvas):
        cloud = dataset(["banking", "profit"], [100, 0], [4, 1], key="thematic_areas")
        assert draw_word_cloud(canvas, cloud, 0, 0, 800, 400, [RED, BLUE]) == 2
        assert "banking" in canvas.texts

    def test_word_cloud_layout_is_deterministic(self):
        assert word_cloud_layout(5, 100, 100) == word_cloud_layout(5, 100, 100)
