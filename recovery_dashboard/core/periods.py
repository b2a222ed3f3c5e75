#!/usr/bin/env python3
"""
Date Windows for the Recovery Dashboard

Client-side date handling: the overall study range, the fixed-length windows
the date slider steps through, and the (year, month) pairs used to build
monthly composites.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union
import pandas as pd

DateLike = Union[str, date, datetime, pd.Timestamp]


def to_date(value: DateLike) -> date:
    """Convert an ISO string, datetime or Timestamp to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.to_datetime(value).date()


def resolve_date_range(start: DateLike, end: Optional[DateLike] = None) -> Tuple[date, date]:
    """
    Resolve the study date range.

    Args:
        start: Range start
        end: Range end, today when not given

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If the start is not before the end
    """
    start_date = to_date(start)
    end_date = to_date(end) if end else date.today()

    if start_date >= end_date:
        raise ValueError(f"Start date {start_date} must be before end date {end_date}")

    return start_date, end_date


def build_periods(start: DateLike, end: DateLike, period_days: int = 30) -> List[Tuple[date, date]]:
    """
    Split a date range into consecutive windows of period_days.

    Each window is half-open, [window_start, window_end). The last window
    starts on or before the range end and may extend past it.
    """
    if period_days <= 0:
        raise ValueError(f"Period length must be positive, got {period_days}")

    start_date, end_date = resolve_date_range(start, end)
    step = timedelta(days=period_days)

    periods = []
    window_start = start_date
    while window_start <= end_date:
        periods.append((window_start, window_start + step))
        window_start += step

    return periods


def period_index_for_date(periods: List[Tuple[date, date]], value: DateLike) -> int:
    """Index of the window containing value, clamped to the first/last window."""
    if not periods:
        raise ValueError("No periods available")

    target = to_date(value)
    if target < periods[0][0]:
        return 0

    for i, (window_start, window_end) in enumerate(periods):
        if window_start <= target < window_end:
            return i

    return len(periods) - 1


def month_sequence(start_year: int, end_year: int,
                   until: Optional[DateLike] = None) -> List[Tuple[int, int]]:
    """
    List (year, month) pairs for every month from start_year to end_year.

    When until is given, months after the month containing it are dropped.
    """
    months = [(year, month)
              for year in range(start_year, end_year + 1)
              for month in range(1, 13)]

    if until is not None:
        limit = to_date(until)
        months = [(y, m) for y, m in months if (y, m) <= (limit.year, limit.month)]

    return months


def format_window(window: Tuple[date, date]) -> str:
    """Human readable label for a window."""
    start_date, end_date = window
    return f"{start_date.isoformat()} to {end_date.isoformat()}"
