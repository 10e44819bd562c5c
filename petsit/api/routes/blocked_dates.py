from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from petsit.core.deps import get_db
from petsit.schemas.blocked_date import BlockedDateCreate, BlockedDateOut
from petsit.services.audit_service import write_audit_log
from petsit.services.blocked_date_service import block_dates, list_blocked_dates, unblock_date
from petsit.services.date_range import DateRange, InvalidDateRange

router = APIRouter()


@router.get("/{sitter_id}/blocked-dates", response_model=list[BlockedDateOut])
def list_blocks(
    sitter_id: str,
    from_: date | None = Query(default=None, alias="from"),
    to: date | None = None,
    db: Session = Depends(get_db),
):
    window = None
    if from_ and to:
        try:
            window = DateRange(from_, to)
        except InvalidDateRange:
            raise HTTPException(status_code=400, detail="Invalid date range")
    return list_blocked_dates(db, sitter_id=sitter_id, window=window)


@router.post("/{sitter_id}/blocked-dates", response_model=list[BlockedDateOut])
def create_blocks(sitter_id: str, payload: BlockedDateCreate, request: Request, db: Session = Depends(get_db)):
    try:
        date_range = DateRange.parse(payload.start_date, payload.end_date)
    except InvalidDateRange:
        raise HTTPException(status_code=400, detail="Invalid date range")

    created = block_dates(db, sitter_id=sitter_id, date_range=date_range, reason=payload.reason)

    write_audit_log(
        db,
        actor_user_id=sitter_id,
        action_type="BLOCKED_DATES_CREATE",
        target_type="sitter",
        target_id=sitter_id,
        summary="Blocked dates",
        diff_json={"count": len(created), "from": str(date_range.start), "to": str(date_range.end)},
        request=request,
    )
    return created


@router.delete("/{sitter_id}/blocked-dates/{blocked_date_id}")
def delete_block(sitter_id: str, blocked_date_id: str, request: Request, db: Session = Depends(get_db)):
    unblock_date(db, sitter_id=sitter_id, blocked_date_id=blocked_date_id)

    write_audit_log(
        db,
        actor_user_id=sitter_id,
        action_type="BLOCKED_DATE_DELETE",
        target_type="blocked_date",
        target_id=blocked_date_id,
        summary="Deleted blocked date",
        request=request,
    )
    return {"ok": True}
