from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class SitterAvailabilityOut(BaseModel):
    sitter_id: str
    from_date: date
    to_date: date
    blocked_dates: list[date]
    booked_dates: list[date]
    pending_dates: list[date]


class AvailabilityCheckOut(BaseModel):
    available: bool
    reason: str | None = None
    message: str = ""
