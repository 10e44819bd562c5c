from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from petsit.core.deps import get_db
from petsit.schemas.booking import BookingCancelIn, BookingCreate, BookingOut, BookingStatus, SitterResponseIn
from petsit.services.audit_service import write_audit_log
from petsit.services.booking_service import (
    accept_booking,
    cancel_booking,
    complete_booking,
    create_booking_request,
    get_booking,
    list_bookings,
    reject_booking,
)
from petsit.services.date_range import DateRange, InvalidDateRange

router = APIRouter()


@router.get("", response_model=list[BookingOut])
def list_all(
    sitter_id: str | None = None,
    owner_id: str | None = None,
    status: BookingStatus | None = None,
    db: Session = Depends(get_db),
):
    return list_bookings(db, sitter_id=sitter_id, owner_id=owner_id, status=status.value if status else None)


@router.post("", response_model=BookingOut, status_code=201)
def create(payload: BookingCreate, request: Request, db: Session = Depends(get_db)):
    try:
        date_range = DateRange(payload.start_date, payload.end_date)
    except InvalidDateRange:
        raise HTTPException(status_code=400, detail="Invalid date range")

    b = create_booking_request(
        db,
        sitter_id=payload.sitter_id,
        owner_id=payload.owner_id,
        date_range=date_range,
        message=payload.message,
    )

    write_audit_log(
        db,
        actor_user_id=payload.owner_id,
        action_type="BOOKING_REQUEST",
        target_type="booking",
        target_id=b.id,
        summary="Booking requested",
        diff_json={"sitter_id": b.sitter_id, "from": str(b.start_date), "to": str(b.end_date)},
        request=request,
    )
    return b


@router.get("/{booking_id}", response_model=BookingOut)
def get_one(booking_id: str, db: Session = Depends(get_db)):
    return get_booking(db, booking_id)


@router.post("/{booking_id}/accept", response_model=BookingOut)
def accept(booking_id: str, payload: SitterResponseIn, request: Request, db: Session = Depends(get_db)):
    b = accept_booking(db, booking=get_booking(db, booking_id), sitter_response=payload.sitter_response)
    write_audit_log(db, actor_user_id=b.sitter_id, action_type="BOOKING_ACCEPT", target_type="booking", target_id=b.id, summary="Accepted booking", request=request)
    return b


@router.post("/{booking_id}/reject", response_model=BookingOut)
def reject(booking_id: str, payload: SitterResponseIn, request: Request, db: Session = Depends(get_db)):
    b = reject_booking(db, booking=get_booking(db, booking_id), sitter_response=payload.sitter_response)
    write_audit_log(db, actor_user_id=b.sitter_id, action_type="BOOKING_REJECT", target_type="booking", target_id=b.id, summary="Rejected booking", request=request)
    return b


@router.post("/{booking_id}/cancel", response_model=BookingOut)
def cancel(booking_id: str, payload: BookingCancelIn, request: Request, db: Session = Depends(get_db)):
    b = cancel_booking(db, booking=get_booking(db, booking_id), reason=payload.reason)
    write_audit_log(db, actor_user_id=None, action_type="BOOKING_CANCEL", target_type="booking", target_id=b.id, summary="Cancelled booking", request=request)
    return b


@router.post("/{booking_id}/complete", response_model=BookingOut)
def complete(booking_id: str, request: Request, db: Session = Depends(get_db)):
    b = complete_booking(db, booking=get_booking(db, booking_id))
    write_audit_log(db, actor_user_id=None, action_type="BOOKING_COMPLETE", target_type="booking", target_id=b.id, summary="Completed booking", request=request)
    return b
