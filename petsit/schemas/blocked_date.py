from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class BlockedDateCreate(BaseModel):
    start_date: date
    end_date: date | None = None  # single day when omitted
    reason: str = Field(default="", max_length=255)


class BlockedDateOut(BaseModel):
    id: str
    sitter_id: str
    blocked_date: date
    reason: str

    class Config:
        from_attributes = True
