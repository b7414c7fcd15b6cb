from __future__ import annotations

from typing import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from content_scheduler.db import Base, get_session
from content_scheduler.holidays import HolidayCalendar, get_default_holidays
from content_scheduler.schemas import HospitalRecord, QuotaSnapshot


@pytest.fixture
def holidays() -> HolidayCalendar:
    return get_default_holidays()


@pytest.fixture
def hospital() -> HospitalRecord:
    return HospitalRecord(id=1, name="서울치과", base_due_day=30)


def make_quota(**overrides) -> QuotaSnapshot:
    fields = {"brand": 0, "trend": 0, "eonron_bodo": 0, "jisikin": 0}
    fields.update(overrides)
    return QuotaSnapshot(**fields)


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite://",
                           connect_args={"check_same_thread": False},
                           poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    yield factory
    engine.dispose()


@pytest.fixture
def session(session_factory) -> Iterator[Session]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient

    from main import app

    def _override() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_session] = _override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
