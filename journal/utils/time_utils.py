"""
Time utility functions for the journal insight engine.

This module provides date calculation utilities for aggregate buckets and
entry-store date ranges, handling per-entry, daily, weekly, and monthly
granularities.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from dateutil.relativedelta import relativedelta
from typing import Optional, Union

from journal.exceptions import InvalidDateRangeError, InvalidGranularityError
from journal.utils.constants import (
    GRANULARITY_NONE, GRANULARITY_DAILY, GRANULARITY_WEEKLY, GRANULARITY_MONTHLY,
    GRANULARITY_CHOICES,
)


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range used to query the entry store."""
    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidDateRangeError(self.start, self.end)

    def __contains__(self, value: date) -> bool:
        return self.start <= value <= self.end

    @property
    def days(self) -> int:
        return calculate_days_in_range(self.start, self.end)

    @classmethod
    def last_days(cls, days: int, reference_date: Optional[date] = None) -> 'DateRange':
        """Range covering the last `days` days, ending on reference_date (default today)."""
        if reference_date is None:
            reference_date = date.today()
        return cls(reference_date - timedelta(days=max(days, 1) - 1), reference_date)

    @classmethod
    def last_complete_week(cls, reference_date: Optional[date] = None) -> 'DateRange':
        """
        Monday..Sunday of the most recent week that ended before reference_date.

        Examples:
            >>> DateRange.last_complete_week(date(2025, 12, 22))  # Monday
            DateRange(start=date(2025, 12, 15), end=date(2025, 12, 21))
        """
        if reference_date is None:
            reference_date = date.today()
        end = get_week_start(reference_date) - timedelta(days=1)
        return cls(get_week_start(end), end)

    @classmethod
    def between(cls, start: Union[date, datetime, str], end: Union[date, datetime, str]) -> 'DateRange':
        """Range from date-like bounds (dates, datetimes or ISO strings)."""
        return cls(coerce_date(start), coerce_date(end))


def get_week_start(target_date: date) -> date:
    """
    Monday of the ISO week containing target_date.

    Examples:
        >>> get_week_start(date(2024, 1, 3))  # Wednesday
        date(2024, 1, 1)
        >>> get_week_start(date(2024, 1, 7))  # Sunday
        date(2024, 1, 1)
    """
    return target_date - timedelta(days=target_date.weekday())


def get_month_start(target_date: date) -> date:
    """First day of the calendar month containing target_date."""
    return target_date + relativedelta(day=1)


def get_bucket_start(target_date: date, granularity: str) -> date:
    """
    Calculate the first date of the aggregate bucket holding target_date.

    Weekly buckets start on Monday (ISO week standard); monthly buckets key on
    the first day of the calendar month. Per-entry and daily buckets key on the
    date itself.
    """
    if granularity in (GRANULARITY_NONE, GRANULARITY_DAILY):
        return target_date
    elif granularity == GRANULARITY_WEEKLY:
        return get_week_start(target_date)
    elif granularity == GRANULARITY_MONTHLY:
        return get_month_start(target_date)
    raise InvalidGranularityError(granularity, GRANULARITY_CHOICES)


def get_bucket_key(target_date: date, granularity: str) -> str:
    """ISO date string key for the bucket holding target_date."""
    return get_bucket_start(target_date, granularity).isoformat()


def calculate_days_in_range(start_date: date, end_date: date) -> int:
    """
    Calculate the number of days between two dates (inclusive).

    Args:
        start_date: Range start
        end_date: Range end

    Returns:
        int: Number of days
    """
    return (end_date - start_date).days + 1


def coerce_date(value: Union[date, datetime, str]) -> date:
    """
    Normalise a date-like value to a date.

    Accepts date, datetime, or an ISO 'YYYY-MM-DD' string (a trailing time
    component is ignored).

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Could not parse date value: {value!r}")


def format_bucket_label(bucket_key: str, granularity: str, date_format: str = '%b %d, %Y') -> str:
    """
    Format a bucket key as a human-readable string.

    Examples:
        >>> format_bucket_label('2025-12-01', 'weekly')
        'Week of Dec 01, 2025'
        >>> format_bucket_label('2025-12-01', 'monthly')
        'December 2025'
    """
    start = date.fromisoformat(bucket_key)
    if granularity == GRANULARITY_WEEKLY:
        return f"Week of {start.strftime(date_format)}"
    elif granularity == GRANULARITY_MONTHLY:
        return start.strftime('%B %Y')
    return start.strftime(date_format)


def format_range_label(start: date, end: date) -> str:
    """
    Short label for a date range.

    Examples:
        >>> format_range_label(date(2025, 12, 14), date(2025, 12, 20))
        'Dec 14-20, 2025'
        >>> format_range_label(date(2025, 12, 29), date(2026, 1, 4))
        'Dec 29 - Jan 4, 2026'
    """
    if (start.year, start.month) == (end.year, end.month):
        return f"{start:%b} {start.day}-{end.day}, {end.year}"
    return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"
