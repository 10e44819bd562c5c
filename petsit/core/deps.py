from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from petsit.db.session import SessionLocal
from petsit.services.availability_service import AvailabilityStore, SqlAvailabilityStore


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_availability_store(db: Session = Depends(get_db)) -> AvailabilityStore:
    return SqlAvailabilityStore(db)
