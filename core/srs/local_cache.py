"""
Local device cache for SRS state.

A single JSON file per device holding every card state plus the daily
counter, so practice works offline and starts instantly. The remote
database remains the source of truth (see core.srs.sync).

Any problem reading the file (missing, unreadable, malformed, invalid values)
yields an empty store, and a bad card entry is dropped on its own: a
corrupted cache must never block practice.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from core.srs.constants import Grade, MAX_EASE, MIN_EASE
from core.srs.daily_counter import DailyIntroductionCounter, roll_over
from core.srs.memory_state import CardState, ensure_utc
from core.srs.store import SrsStore

logger = logging.getLogger(__name__)

CACHE_VERSION = 1


# ---- Serialized Records ----

class CardStateRecord(BaseModel):
    """JSON shape of one card state."""
    repetitions: int = Field(..., ge=0)
    ease: float = Field(..., ge=MIN_EASE, le=MAX_EASE)
    interval: int = Field(..., ge=0)
    due_at: datetime
    last_grade: Optional[Grade] = None

    @field_validator("due_at")
    @classmethod
    def _due_at_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @classmethod
    def from_state(cls, state: CardState) -> "CardStateRecord":
        return cls(
            repetitions=state.repetitions,
            ease=state.ease,
            interval=state.interval_days,
            due_at=state.due_at,
            last_grade=state.last_grade,
        )

    def to_state(self) -> CardState:
        return CardState(
            repetitions=self.repetitions,
            ease=self.ease,
            interval_days=self.interval,
            due_at=self.due_at,
            last_grade=self.last_grade,
        )


class DailyRecord(BaseModel):
    date: str
    new_introduced: int = Field(0, ge=0)


class SrsStoreRecord(BaseModel):
    """
    JSON shape of the whole cache file.

    Card entries and the counter are validated one by one in load_store so a
    single bad entry only drops that entry.
    """
    version: int = CACHE_VERSION
    per_card: dict[str, Any] = Field(default_factory=dict)
    daily: Optional[Any] = None


# ---- Load / Save ----

def load_store(path: Path, today: str) -> SrsStore:
    """
    Load the local cache, rolling the daily counter over to `today`.

    Args:
        path: Cache file location
        today: Current date key (YYYY-MM-DD)

    Returns:
        SrsStore (empty if the cache is missing or unusable)
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return SrsStore(daily=roll_over(None, today))
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read SRS cache %s: %s", path, exc)
        return SrsStore(daily=roll_over(None, today))

    try:
        record = SrsStoreRecord.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning("Discarding corrupt SRS cache %s: %s", path, exc.errors()[:3])
        return SrsStore(daily=roll_over(None, today))

    per_card: dict[str, CardState] = {}
    for word_id, entry in record.per_card.items():
        try:
            per_card[word_id] = CardStateRecord.model_validate(entry).to_state()
        except ValidationError as exc:
            logger.warning("Ignoring corrupt cached state for %s: %s", word_id, exc.errors()[:1])

    daily = None
    if record.daily is not None:
        try:
            daily_record = DailyRecord.model_validate(record.daily)
            daily = DailyIntroductionCounter(
                date=daily_record.date,
                new_introduced=daily_record.new_introduced,
            )
        except ValidationError:
            logger.warning("Resetting corrupt cached daily counter")

    return SrsStore(per_card=per_card, daily=roll_over(daily, today))


def save_store(path: Path, store: SrsStore) -> None:
    """
    Write the store to the local cache (atomic replace).
    """
    record = SrsStoreRecord(
        per_card={
            word_id: CardStateRecord.from_state(state).model_dump(mode="json")
            for word_id, state in store.per_card.items()
        },
        daily=(
            DailyRecord(
                date=store.daily.date,
                new_introduced=store.daily.new_introduced,
            ).model_dump(mode="json")
            if store.daily is not None
            else None
        ),
    )

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(record.model_dump_json(indent=2), encoding="utf-8")
    tmp_path.replace(path)
    logger.debug("Wrote SRS cache %s (%d cards)", path, len(store.per_card))
