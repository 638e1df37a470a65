"""Tests for date window resolution and month bucketing."""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from src.analytics.dates import month_buckets, month_labels, resolve_date_window, subtract_months
from src.models.schemas import CustomDateRange, DateWindow


class TestResolveDateWindow:
    """Tests for preset and custom windows."""

    @pytest.mark.parametrize("preset,days", [("7d", 7), ("30d", 30), ("90d", 90)])
    def test_day_presets(self, now, preset, days):
        window = resolve_date_window(preset, now)
        assert window.end == now
        assert (window.end - window.start).days == days

    def test_twelve_months(self, now):
        window = resolve_date_window("12m", now)
        assert window.start == datetime(2025, 3, 31, 12, 0)

    def test_unknown_preset_falls_back_to_90_days(self, now):
        window = resolve_date_window("banana", now)
        assert (window.end - window.start).days == 90

    def test_aware_now_is_normalized(self):
        aware = datetime(2026, 3, 31, 14, 0, tzinfo=timezone.utc)
        window = resolve_date_window("7d", aware)
        assert window.end.tzinfo is None
        assert window.end == datetime(2026, 3, 31, 14, 0)

    def test_custom_range_covers_whole_days(self, now):
        window = resolve_date_window(CustomDateRange(startDate=date(2026, 1, 1), endDate=date(2026, 1, 31)), now)
        assert window.start == datetime(2026, 1, 1, 0, 0)
        assert window.end.date() == date(2026, 1, 31)
        assert window.contains(datetime(2026, 1, 31, 23, 59))

    def test_custom_range_rejects_reversed_dates(self):
        with pytest.raises(ValidationError):
            CustomDateRange(startDate=date(2026, 2, 1), endDate=date(2026, 1, 1))


class TestMonths:
    """Tests for calendar month helpers."""

    def test_subtract_months_clamps_day(self):
        assert subtract_months(datetime(2026, 3, 31), 1) == datetime(2026, 2, 28)

    def test_month_buckets_include_partial_months(self):
        window = DateWindow(start=datetime(2025, 12, 31), end=datetime(2026, 3, 1))
        assert month_buckets(window) == [(2025, 12), (2026, 1), (2026, 2), (2026, 3)]

    def test_labels_use_month_names(self):
        assert month_labels([(2025, 12), (2026, 1)]) == ["December", "January"]

    def test_labels_disambiguate_repeated_months(self):
        """A 12m window spans 13 months, so the first and last share a name."""
        keys = month_buckets(DateWindow(start=datetime(2025, 3, 31), end=datetime(2026, 3, 31)))
        labels = month_labels(keys)
        assert len(labels) == 13
        assert labels[0] == "Mar 2025"
        assert labels[-1] == "Mar 2026"
        assert len(set(labels)) == 13

    def test_window_label(self):
        window = DateWindow(start=datetime(2026, 1, 1), end=datetime(2026, 3, 31))
        assert window.label == "January 2026 – March 2026"
