from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class BookingStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    cancelled = "cancelled"
    completed = "completed"


class BookingCreate(BaseModel):
    sitter_id: str
    owner_id: str
    start_date: date
    end_date: date
    message: str = Field(default="", max_length=2000)


class SitterResponseIn(BaseModel):
    sitter_response: str = Field(default="", max_length=2000)


class BookingCancelIn(BaseModel):
    reason: str = Field(default="", max_length=255)


class BookingOut(BaseModel):
    id: str
    sitter_id: str
    owner_id: str
    start_date: date
    end_date: date
    status: BookingStatus
    message: str
    sitter_response: str
    cancellation_reason: str
    accepted_at: datetime | None = None
    rejected_at: datetime | None = None
    cancelled_at: datetime | None = None
    completed_at: datetime | None = None

    class Config:
        from_attributes = True
