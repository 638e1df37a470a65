"""Date window resolution and calendar-month bucketing."""

import calendar
from datetime import datetime, timedelta
from typing import List, Tuple, Union

from src.models.schemas import CustomDateRange, DateWindow, to_naive_utc

MonthKey = Tuple[int, int]

PRESET_DAYS = {"7d": 7, "30d": 30, "90d": 90}


def subtract_months(moment: datetime, months: int) -> datetime:
    """Step back whole calendar months, clamping the day to the target month."""
    total = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def resolve_date_window(
    date_range: Union[str, CustomDateRange],
    now: datetime,
) -> DateWindow:
    """
    Turn a request date range into a concrete window ending at ``now``.

    Args:
        date_range: '7d', '30d', '90d', '12m' or an explicit range.
        now: The fixed "now" of this report run.

    Returns:
        Inclusive DateWindow. Unknown presets fall back to 90 days.
    """
    if isinstance(date_range, CustomDateRange):
        return date_range.to_window()

    now = to_naive_utc(now)
    if date_range == "12m":
        return DateWindow(start=subtract_months(now, 12), end=now)

    days = PRESET_DAYS.get(date_range, 90)
    return DateWindow(start=now - timedelta(days=days), end=now)


def month_key(moment: datetime) -> MonthKey:
    return (moment.year, moment.month)


def month_buckets(window: DateWindow) -> List[MonthKey]:
    """Every calendar month touched by the window, oldest first."""
    keys: List[MonthKey] = []
    year, month = window.start.year, window.start.month
    last = month_key(window.end)
    while (year, month) <= last:
        keys.append((year, month))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return keys


def month_labels(keys: List[MonthKey]) -> List[str]:
    """
    Display labels for month buckets.

    Month names alone ('January') unless a name repeats inside the window
    (a 12m range spans 13 months), in which case 'Jan 2025' style is used.
    """
    names = [calendar.month_name[m] for _, m in keys]
    if len(set(names)) == len(names):
        return names
    return [f"{calendar.month_abbr[m]} {y}" for y, m in keys]
