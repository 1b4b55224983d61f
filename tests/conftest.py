"""
Pytest configuration for the companion engine tests
"""

import os
from datetime import date, datetime, timedelta

import pytest
from cryptography.fernet import Fernet

# Settings are read at import time, so set them BEFORE importing any app modules
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FERNET_SECRET"] = Fernet.generate_key().decode()
os.environ["RATE_LIMIT_ENABLED"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from app.models import database  # noqa: E402
from app.schemas.checkin_schemas import CheckinMetrics, CheckinRecord  # noqa: E402
from app.services.stores import ActionCatalog, Stores  # noqa: E402
from app.utils.action_library import SEED_ACTION_TEMPLATES  # noqa: E402

NEUTRAL = dict(mood=7, stress=3, sleep=7, energy=7, focus=7, anxiety=3)


@pytest.fixture
def make_metrics():
    """Neutral scales with any field overridden."""
    def _make(**overrides) -> CheckinMetrics:
        return CheckinMetrics(**{**NEUTRAL, **overrides})
    return _make


@pytest.fixture
def make_record():
    def _make(day: date, user_id: str = "user-1", created_at=None, **overrides) -> CheckinRecord:
        return CheckinRecord(
            user_id=user_id,
            date=day,
            created_at=created_at,
            **{**NEUTRAL, **overrides},
        )
    return _make


@pytest.fixture
def make_history(make_record):
    """
    Records for consecutive days ending at `end`, most recent first.
    `moods` / `stresses` are given oldest first, like a calendar.
    """
    def _make(moods, end: date, stresses=None, user_id: str = "user-1"):
        stresses = stresses or [3] * len(moods)
        start = end - timedelta(days=len(moods) - 1)
        records = [
            make_record(start + timedelta(days=i), user_id=user_id, mood=m, stress=s)
            for i, (m, s) in enumerate(zip(moods, stresses))
        ]
        return list(reversed(records))
    return _make


@pytest.fixture
def db():
    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def stores(db):
    ActionCatalog(db).seed(SEED_ACTION_TEMPLATES)
    return Stores(db)


@pytest.fixture
def client(stores):
    from app.main import app

    # No context manager: the lifespan would start the scheduler
    return TestClient(app)


@pytest.fixture
def morning():
    """Today at 09:00, before any anchor window closes."""
    return datetime.utcnow().replace(hour=9, minute=0, second=0, microsecond=0)
