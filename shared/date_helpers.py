"""
Date helpers for the event wizard calendar.

The start/end date pickers are react-day-picker popovers: the header shows
"<Month> <Year>" and each day is a button labelled with the day number.
These helpers compute future dates in that shape so tests can always pick
a day the calendar allows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta


@dataclass(frozen=True)
class FutureDate:
    """A calendar day expressed the way the date picker renders it."""

    day: int
    month_name: str
    year: int

    @property
    def month_year(self) -> str:
        """Calendar header text, e.g. ``"February 2026"``."""
        return f"{self.month_name} {self.year}"

    @classmethod
    def from_date(cls, value: date) -> "FutureDate":
        return cls(day=value.day, month_name=value.strftime("%B"), year=value.year)


def get_future_date(days_from_now: int = 14) -> FutureDate:
    """
    Get a date relative to today.

    Args:
        days_from_now: Number of days to add to today's local date.

    Returns:
        FutureDate for the computed day.
    """
    return FutureDate.from_date(date.today() + timedelta(days=days_from_now))


def get_end_date(start_days_from_now: int = 14, duration_days: int = 1) -> FutureDate:
    """
    Get an end date that falls after the matching start date.

    Args:
        start_days_from_now: Days from today used for the start date.
        duration_days: How many days after the start the event ends.
    """
    return get_future_date(start_days_from_now + duration_days)
