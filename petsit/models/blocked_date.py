from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from petsit.db.base import Base
from petsit.models._mixins import TimestampMixin


class BlockedDate(Base, TimestampMixin):
    __tablename__ = "blocked_dates"
    __table_args__ = (UniqueConstraint("sitter_id", "blocked_date", name="uq_blocked_dates_sitter_day"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    sitter_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    blocked_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    reason: Mapped[str] = mapped_column(String(255), nullable=False, default="")
