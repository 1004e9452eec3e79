import random
from datetime import datetime, timezone

import pytest

from core.srs import database
from core.srs.constants import Grade
from core.srs.memory_state import CardState


FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def utc_day(monkeypatch):
    """Counter days are UTC unless a test sets SRS_TIMEZONE itself."""
    monkeypatch.delenv("SRS_TIMEZONE", raising=False)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def rng():
    """Seeded randomness so shuffles are reproducible."""
    return random.Random(1234)


@pytest.fixture
def make_state():
    """Factory for CardState values with sensible defaults."""
    def _make(repetitions=2, ease=2.5, interval_days=6, due_at=FIXED_NOW, last_grade=Grade.GOOD):
        return CardState(
            repetitions=repetitions,
            ease=ease,
            interval_days=interval_days,
            due_at=due_at,
            last_grade=last_grade,
        )
    return _make


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    """Points DATABASE_URL at a fresh SQLite file and creates the tables."""
    db_path = tmp_path / "srs.sqlite"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_path}")
    monkeypatch.delenv("TEST_MODE", raising=False)
    database.init_db()
    yield db_path
    database.get_engine().dispose()
