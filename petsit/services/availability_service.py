from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from petsit.core.config import get_settings, today as local_today
from petsit.models.blocked_date import BlockedDate
from petsit.models.booking import OCCUPYING_STATUSES, Booking
from petsit.services.date_range import DateRange, InvalidDateRange, expand_dates, parse_day

logger = logging.getLogger(__name__)


class DayOccupancy(str, Enum):
    FREE = "free"
    BLOCKED = "blocked"
    BOOKED = "booked"
    PENDING = "pending"


class UnavailableReason(str, Enum):
    BLOCKED = "blocked"
    ALREADY_BOOKED = "already booked"


REASON_MESSAGES = {
    UnavailableReason.BLOCKED: "The sitter has blocked one or more dates in this period",
    UnavailableReason.ALREADY_BOOKED: "The sitter already has a confirmed booking in this period",
}


@dataclass(frozen=True)
class BookingSpan:
    start_date: date | str
    end_date: date | str
    status: str


@dataclass(frozen=True)
class DayFlags:
    blocked: bool = False
    booked: bool = False
    pending: bool = False


@dataclass(frozen=True)
class SitterOccupancy:
    """Blocked, booked and pending days of one sitter, kept as independent sets.

    A day can be blocked and pending at the same time; both facts are kept.
    """

    blocked: frozenset[date] = field(default_factory=frozenset)
    booked: frozenset[date] = field(default_factory=frozenset)
    pending: frozenset[date] = field(default_factory=frozenset)

    @classmethod
    def empty(cls) -> "SitterOccupancy":
        return cls()

    def is_empty(self) -> bool:
        return not (self.blocked or self.booked or self.pending)

    def flags_for(self, day: date) -> DayFlags:
        return DayFlags(blocked=day in self.blocked, booked=day in self.booked, pending=day in self.pending)

    def classify(self, day: date) -> DayOccupancy:
        """Single display classification: blocked, then booked, then pending."""
        if day in self.blocked:
            return DayOccupancy.BLOCKED
        if day in self.booked:
            return DayOccupancy.BOOKED
        if day in self.pending:
            return DayOccupancy.PENDING
        return DayOccupancy.FREE

    def calendar(self, window: DateRange) -> dict[date, DayOccupancy]:
        return {d: self.classify(d) for d in window}


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    reason: UnavailableReason | None = None

    @property
    def message(self) -> str:
        return REASON_MESSAGES[self.reason] if self.reason else ""


class AvailabilityStore(Protocol):
    def blocked_dates(self, sitter_id: str, window: DateRange) -> Iterable[date | str]:
        ...

    def active_bookings(self, sitter_id: str, window: DateRange) -> Iterable[BookingSpan]:
        ...


class SqlAvailabilityStore:
    """Reads blocked days and pending/accepted bookings from the database."""

    def __init__(self, db: Session):
        self.db = db

    def blocked_dates(self, sitter_id: str, window: DateRange) -> list[date]:
        q = (
            select(BlockedDate.blocked_date)
            .where(BlockedDate.sitter_id == sitter_id)
            .where(BlockedDate.blocked_date >= window.start)
            .where(BlockedDate.blocked_date <= window.end)
        )
        return list(self.db.execute(q).scalars().all())

    def active_bookings(self, sitter_id: str, window: DateRange) -> list[BookingSpan]:
        q = (
            select(Booking.start_date, Booking.end_date, Booking.status)
            .where(Booking.sitter_id == sitter_id)
            .where(Booking.status.in_(OCCUPYING_STATUSES))
            .where(Booking.end_date >= window.start)
            .where(Booking.start_date <= window.end)
        )
        return [BookingSpan(start_date=s, end_date=e, status=st) for s, e, st in self.db.execute(q).all()]


def default_window(window_start: date | None = None, window_end: date | None = None, *, today: date | None = None) -> DateRange | None:
    """Resolve the query window; None when the window is inverted."""
    horizon = get_settings().availability_window_days
    start = window_start or today or local_today()
    end = window_end or DateRange.window(start, horizon).end
    if start > end:
        return None
    return DateRange(start, end)


def compute_occupancy(
    store: AvailabilityStore,
    sitter_id: str,
    window_start: date | None = None,
    window_end: date | None = None,
    *,
    today: date | None = None,
) -> SitterOccupancy:
    window = default_window(window_start, window_end, today=today)
    if window is None:
        return SitterOccupancy.empty()

    # Fail open: an unreachable store or unreadable rows must not block the booking UI
    try:
        blocked = _blocked_days(store.blocked_dates(sitter_id, window), sitter_id)
        booked: set[date] = set()
        pending: set[date] = set()
        for b in store.active_bookings(sitter_id, window):
            try:
                days = expand_dates(parse_day(b.start_date), parse_day(b.end_date))
            except InvalidDateRange:
                logger.warning("Skipping booking with unreadable dates for sitter %s: %r", sitter_id, b)
                continue
            if b.status == "accepted":
                booked.update(days)
            elif b.status == "pending":
                pending.update(days)
    except Exception:
        logger.warning("Availability lookup failed for sitter %s, assuming free", sitter_id, exc_info=True)
        return SitterOccupancy.empty()

    return SitterOccupancy(blocked=frozenset(blocked), booked=frozenset(booked), pending=frozenset(pending))


def _blocked_days(rows: Iterable[date | str], sitter_id: str) -> set[date]:
    days: set[date] = set()
    for raw in rows:
        try:
            days.add(parse_day(raw))
        except InvalidDateRange:
            logger.warning("Skipping unreadable blocked date for sitter %s: %r", sitter_id, raw)
    return days


def is_range_available(store: AvailabilityStore, sitter_id: str, requested: DateRange) -> AvailabilityResult:
    occupancy = compute_occupancy(store, sitter_id, requested.start, requested.end)
    requested_days = requested.days()

    if any(d in occupancy.blocked for d in requested_days):
        return AvailabilityResult(available=False, reason=UnavailableReason.BLOCKED)

    if any(d in occupancy.booked for d in requested_days):
        return AvailabilityResult(available=False, reason=UnavailableReason.ALREADY_BOOKED)

    # Pending requests never exclude a range
    return AvailabilityResult(available=True)
