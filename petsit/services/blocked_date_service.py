from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from petsit.models.blocked_date import BlockedDate
from petsit.models.user import User
from petsit.services.date_range import DateRange

logger = logging.getLogger(__name__)


def _get_sitter(db: Session, sitter_id: str) -> User:
    sitter = db.get(User, sitter_id)
    if not sitter or sitter.role != "sitter":
        raise HTTPException(status_code=404, detail="Sitter not found")
    return sitter


def list_blocked_dates(db: Session, *, sitter_id: str, window: DateRange | None = None) -> list[BlockedDate]:
    q = select(BlockedDate).where(BlockedDate.sitter_id == sitter_id)
    if window is not None:
        q = q.where(BlockedDate.blocked_date >= window.start, BlockedDate.blocked_date <= window.end)
    q = q.order_by(BlockedDate.blocked_date.asc())
    return list(db.execute(q).scalars().all())


def block_dates(db: Session, *, sitter_id: str, date_range: DateRange, reason: str = "") -> list[BlockedDate]:
    """Block every day of the range. Days already blocked are left as they are."""
    _get_sitter(db, sitter_id)

    existing = {b.blocked_date for b in list_blocked_dates(db, sitter_id=sitter_id, window=date_range)}

    created: list[BlockedDate] = []
    for d in date_range:
        if d in existing:
            continue
        b = BlockedDate(sitter_id=sitter_id, blocked_date=d, reason=(reason or "")[:255])
        db.add(b)
        created.append(b)
    db.commit()
    for b in created:
        db.refresh(b)

    logger.info("Sitter %s blocked %d day(s) from %s to %s", sitter_id, len(created), date_range.start, date_range.end)
    return created


def unblock_date(db: Session, *, sitter_id: str, blocked_date_id: str) -> None:
    b = db.get(BlockedDate, blocked_date_id)
    if not b or b.sitter_id != sitter_id:
        raise HTTPException(status_code=404, detail="Not found")
    db.delete(b)
    db.commit()
