from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import petsit.models  # noqa: F401
from petsit.core.deps import get_db
from petsit.db.base import Base
from petsit.main import create_app
from petsit.models.blocked_date import BlockedDate
from petsit.models.booking import Booking
from petsit.models.user import User


@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sitter(db) -> User:
    u = User(email="sitter@example.com", name="Sam Sitter", role="sitter")
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def owner(db) -> User:
    u = User(email="owner@example.com", name="Olive Owner", role="owner")
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def future():
    """Date helper: future(n) is n days from today."""
    base = date.today() + timedelta(days=7)

    def _at(offset: int) -> date:
        return base + timedelta(days=offset)

    return _at


@pytest.fixture
def add_booking(db, sitter, owner):
    def _add(start: date, end: date, status: str = "pending") -> Booking:
        b = Booking(sitter_id=sitter.id, owner_id=owner.id, start_date=start, end_date=end, status=status)
        db.add(b)
        db.commit()
        return b

    return _add


@pytest.fixture
def add_block(db, sitter):
    def _add(day: date, reason: str = "") -> BlockedDate:
        b = BlockedDate(sitter_id=sitter.id, blocked_date=day, reason=reason)
        db.add(b)
        db.commit()
        return b

    return _add
