from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from petsit.core.config import today as local_today
from petsit.models.blocked_date import BlockedDate
from petsit.models.booking import Booking
from petsit.models.user import User
from petsit.services.availability_service import SqlAvailabilityStore, is_range_available
from petsit.services.date_range import DateRange

logger = logging.getLogger(__name__)

# status -> statuses it may move to
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"accepted", "rejected", "cancelled"},
    "accepted": {"cancelled", "completed"},
    "rejected": set(),
    "cancelled": set(),
    "completed": set(),
}


def _utcnow() -> datetime:
    return datetime.now(tz=ZoneInfo("UTC"))


def _has_blocked_day(db: Session, sitter_id: str, date_range: DateRange) -> bool:
    q = (
        select(BlockedDate.id)
        .where(BlockedDate.sitter_id == sitter_id)
        .where(BlockedDate.blocked_date >= date_range.start)
        .where(BlockedDate.blocked_date <= date_range.end)
        .limit(1)
    )
    return db.execute(q).first() is not None


def _has_overlapping_accepted(db: Session, sitter_id: str, date_range: DateRange, exclude_booking_id: str | None = None) -> bool:
    q = (
        select(Booking.id)
        .where(Booking.sitter_id == sitter_id)
        .where(Booking.status == "accepted")
        .where(Booking.end_date >= date_range.start)
        .where(Booking.start_date <= date_range.end)
    )
    if exclude_booking_id:
        q = q.where(Booking.id != exclude_booking_id)
    q = q.limit(1)
    return db.execute(q).first() is not None


def get_booking(db: Session, booking_id: str) -> Booking:
    b = db.get(Booking, booking_id)
    if not b:
        raise HTTPException(status_code=404, detail="Not found")
    return b


def list_bookings(db: Session, *, sitter_id: str | None = None, owner_id: str | None = None, status: str | None = None) -> list[Booking]:
    q = select(Booking)
    if sitter_id:
        q = q.where(Booking.sitter_id == sitter_id)
    if owner_id:
        q = q.where(Booking.owner_id == owner_id)
    if status:
        q = q.where(Booking.status == status)
    q = q.order_by(Booking.start_date.asc())
    return list(db.execute(q.limit(1000)).scalars().all())


def create_booking_request(
    db: Session,
    *,
    sitter_id: str,
    owner_id: str,
    date_range: DateRange,
    message: str = "",
    today: date | None = None,
) -> Booking:
    sitter = db.get(User, sitter_id)
    if not sitter or sitter.role != "sitter":
        raise HTTPException(status_code=404, detail="Sitter not found")
    owner = db.get(User, owner_id)
    if not owner:
        raise HTTPException(status_code=404, detail="Owner not found")
    if owner_id == sitter_id:
        raise HTTPException(status_code=400, detail="Cannot book yourself")

    if date_range.start < (today or local_today()):
        raise HTTPException(status_code=400, detail="Start date is in the past")

    result = is_range_available(SqlAvailabilityStore(db), sitter_id, date_range)
    if not result.available:
        raise HTTPException(status_code=409, detail=result.reason.value)

    booking = Booking(
        sitter_id=sitter_id,
        owner_id=owner_id,
        start_date=date_range.start,
        end_date=date_range.end,
        status="pending",
        message=(message or "")[:2000],
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)

    logger.info("Booking %s requested for sitter %s (%s to %s)", booking.id, sitter_id, date_range.start, date_range.end)
    return booking


def _check_transition(booking: Booking, new_status: str) -> None:
    if new_status not in ALLOWED_TRANSITIONS.get(booking.status, set()):
        raise HTTPException(status_code=409, detail=f"Cannot move booking from {booking.status} to {new_status}")


def _transition(db: Session, booking: Booking, new_status: str) -> None:
    _check_transition(booking, new_status)
    logger.info("Booking %s: %s -> %s", booking.id, booking.status, new_status)
    booking.status = new_status


def accept_booking(db: Session, *, booking: Booking, sitter_response: str = "") -> Booking:
    date_range = DateRange(booking.start_date, booking.end_date)
    _check_transition(booking, "accepted")
    # The exclusion constraint in the database is the final guard against concurrent accepts
    if _has_blocked_day(db, booking.sitter_id, date_range):
        raise HTTPException(status_code=409, detail="blocked")
    if _has_overlapping_accepted(db, booking.sitter_id, date_range, exclude_booking_id=booking.id):
        raise HTTPException(status_code=409, detail="already booked")

    _transition(db, booking, "accepted")
    booking.accepted_at = _utcnow()
    booking.sitter_response = (sitter_response or "")[:2000]
    db.commit()
    db.refresh(booking)
    return booking


def reject_booking(db: Session, *, booking: Booking, sitter_response: str = "") -> Booking:
    _transition(db, booking, "rejected")
    booking.rejected_at = _utcnow()
    booking.sitter_response = (sitter_response or "")[:2000]
    db.commit()
    db.refresh(booking)
    return booking


def cancel_booking(db: Session, *, booking: Booking, reason: str = "") -> Booking:
    if booking.status == "cancelled":
        return booking
    _transition(db, booking, "cancelled")
    booking.cancelled_at = _utcnow()
    booking.cancellation_reason = (reason or "")[:255]
    db.commit()
    db.refresh(booking)
    return booking


def complete_booking(db: Session, *, booking: Booking) -> Booking:
    _transition(db, booking, "completed")
    booking.completed_at = _utcnow()
    db.commit()
    db.refresh(booking)
    return booking
