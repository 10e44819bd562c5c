from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from petsit.core.deps import get_availability_store
from petsit.schemas.availability import AvailabilityCheckOut, SitterAvailabilityOut
from petsit.services.availability_service import AvailabilityStore, compute_occupancy, default_window, is_range_available
from petsit.services.date_range import DateRange, InvalidDateRange

router = APIRouter()


@router.get("/{sitter_id}/availability", response_model=SitterAvailabilityOut)
def get_availability(
    sitter_id: str,
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    store: AvailabilityStore = Depends(get_availability_store),
):
    window = default_window(from_date, to_date)
    if window is None:
        raise HTTPException(status_code=400, detail="Invalid date range")

    occupancy = compute_occupancy(store, sitter_id, window.start, window.end)
    return SitterAvailabilityOut(
        sitter_id=sitter_id,
        from_date=window.start,
        to_date=window.end,
        blocked_dates=sorted(occupancy.blocked),
        booked_dates=sorted(occupancy.booked),
        pending_dates=sorted(occupancy.pending),
    )


@router.get("/{sitter_id}/availability/check", response_model=AvailabilityCheckOut)
def check_availability(
    sitter_id: str,
    start_date: date,
    end_date: date,
    store: AvailabilityStore = Depends(get_availability_store),
):
    try:
        requested = DateRange(start_date, end_date)
    except InvalidDateRange:
        raise HTTPException(status_code=400, detail="Invalid date range")

    result = is_range_available(store, sitter_id, requested)
    return AvailabilityCheckOut(
        available=result.available,
        reason=result.reason.value if result.reason else None,
        message=result.message,
    )
