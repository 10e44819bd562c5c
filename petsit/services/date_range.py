"""Inclusive calendar-date ranges.

Dates travel as ``YYYY-MM-DD`` strings with no time-of-day or timezone
component, so every comparison here is date-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator


class InvalidDateRange(ValueError):
    pass


def parse_day(value: date | str) -> date:
    """Parse a calendar date from a ``date`` or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        raise InvalidDateRange(f"Expected a calendar date, got a datetime: {value!r}")
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidDateRange(f"Invalid date: {value!r}") from None
    raise InvalidDateRange(f"Invalid date: {value!r}")


def _daterange(start: date, end: date) -> Iterator[date]:
    cur = start
    while cur <= end:
        yield cur
        cur = cur + timedelta(days=1)


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidDateRange(f"Range start {self.start} is after end {self.end}")

    @classmethod
    def parse(cls, start: date | str, end: date | str | None = None) -> "DateRange":
        """Build a range from dates or ISO strings. A missing end means a single day."""
        start_d = parse_day(start)
        end_d = parse_day(end) if end is not None else start_d
        return cls(start_d, end_d)

    @classmethod
    def window(cls, start: date, days: int) -> "DateRange":
        return cls(start, start + timedelta(days=days))

    def days(self) -> list[date]:
        return list(_daterange(self.start, self.end))

    def __iter__(self) -> Iterator[date]:
        return _daterange(self.start, self.end)

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, day: object) -> bool:
        if isinstance(day, datetime) or not isinstance(day, date):
            return False
        return self.start <= day <= self.end

    def overlaps(self, other: "DateRange") -> bool:
        return self.end >= other.start and self.start <= other.end


def expand_dates(start: date, end: date) -> list[date]:
    """Every date from start to end inclusive; empty when start is after end."""
    if start > end:
        return []
    return list(_daterange(start, end))
