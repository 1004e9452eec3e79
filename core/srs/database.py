"""
Database - SRS Database I/O Operations

Handles all database operations for card state, the daily new-card counter,
review events and review flags. Uses SQLAlchemy ORM (Postgres in production,
any SQLAlchemy URL works).

This module handles ONLY database I/O.
Algorithm logic is handled by the scheduler module.
"""

from __future__ import annotations
import logging
from datetime import datetime
from functools import lru_cache
from typing import Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from core.config import get_database_url
from core.srs.constants import Grade, MAX_EASE, MIN_EASE
from core.srs.daily_counter import DailyIntroductionCounter
from core.srs.errors import CorruptStateError
from core.srs.memory_state import CardState, ensure_utc, utc_now
from core.srs.models import (
    Base,
    CardSrs as CardSrsModel,
    DailyCounter as DailyCounterModel,
    ReviewEvent as ReviewEventModel,
    ReviewFlag as ReviewFlagModel,
)

logger = logging.getLogger(__name__)

REVIEW_FLAGS = ("again", "hard")


# ---- Connection Management ----

@lru_cache(maxsize=None)
def _engine_for(db_url: str) -> Engine:
    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False)
    return create_engine(
        db_url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )


def get_engine() -> Engine:
    """
    Get SQLAlchemy engine for the configured database (one per URL).
    """
    return _engine_for(get_database_url())


def get_session() -> Session:
    """
    Get a SQLAlchemy session for database operations.
    """
    SessionLocal = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return SessionLocal()


def init_db():
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times - only creates missing tables.
    """
    engine = get_engine()
    existing_tables = set(inspect(engine).get_table_names())
    missing = set(Base.metadata.tables) - existing_tables
    if missing:
        Base.metadata.create_all(engine)
        logger.debug("Created SRS tables: %s", sorted(missing))


def reset_db():
    """
    DANGEROUS: Delete all data and recreate tables.

    All review history will be lost!
    """
    engine = get_engine()
    Base.metadata.drop_all(engine)
    logger.warning("All SRS tables dropped")
    init_db()


# ---- Row Conversion ----

def row_to_card_state(db_card: CardSrsModel) -> CardState:
    """
    Convert a database row into a CardState.

    Raises:
        CorruptStateError: if the row violates CardState invariants
    """
    if db_card.repetitions is None or db_card.repetitions < 0:
        raise CorruptStateError(f"Invalid repetitions: {db_card.repetitions!r}")
    if db_card.interval_days is None or db_card.interval_days < 0:
        raise CorruptStateError(f"Invalid interval_days: {db_card.interval_days!r}")
    if db_card.ease is None or not (MIN_EASE <= db_card.ease <= MAX_EASE):
        raise CorruptStateError(f"Ease out of range: {db_card.ease!r}")
    if db_card.due_at is None:
        raise CorruptStateError("Missing due_at")

    last_grade = None
    if db_card.last_grade is not None:
        try:
            last_grade = Grade(db_card.last_grade)
        except ValueError:
            raise CorruptStateError(f"Unknown last_grade: {db_card.last_grade!r}") from None

    return CardState(
        repetitions=db_card.repetitions,
        ease=db_card.ease,
        interval_days=db_card.interval_days,
        due_at=ensure_utc(db_card.due_at),
        last_grade=last_grade,
    )


def _apply_card_state(db_card: CardSrsModel, state: CardState, now: datetime) -> None:
    db_card.repetitions = state.repetitions
    db_card.ease = state.ease
    db_card.interval_days = state.interval_days
    db_card.due_at = ensure_utc(state.due_at)
    db_card.last_grade = int(state.last_grade) if state.last_grade is not None else None
    db_card.updated_at = now


# ---- Card State ----

def load_card_states(user_id: str) -> dict[str, CardState]:
    """
    Load all card states for a learner.

    Rows that cannot be converted are skipped (the card is treated as new)
    so a bad row never blocks practice.

    Returns:
        Dict of word_id -> CardState
    """
    session = get_session()
    try:
        db_cards = session.query(CardSrsModel).filter(
            CardSrsModel.user_id == user_id
        ).all()

        result: dict[str, CardState] = {}
        for db_card in db_cards:
            try:
                result[db_card.word_id] = row_to_card_state(db_card)
            except CorruptStateError as exc:
                logger.warning(
                    "Ignoring corrupt SRS row user=%s word=%s: %s",
                    user_id, db_card.word_id, exc
                )
        return result
    finally:
        session.close()


def load_card_state(user_id: str, word_id: str) -> Optional[CardState]:
    """
    Load one card state.

    Returns:
        CardState if found and valid, None for a new (or unreadable) card
    """
    session = get_session()
    try:
        db_card = session.query(CardSrsModel).filter(
            CardSrsModel.user_id == user_id,
            CardSrsModel.word_id == word_id
        ).first()

        if db_card is None:
            return None

        try:
            return row_to_card_state(db_card)
        except CorruptStateError as exc:
            logger.warning("Ignoring corrupt SRS row user=%s word=%s: %s", user_id, word_id, exc)
            return None
    finally:
        session.close()


def save_card_state(user_id: str, word_id: str, state: CardState):
    """
    Save card state (insert or update).
    """
    batch_save_card_states(user_id, {word_id: state})


def batch_save_card_states(user_id: str, states: dict[str, CardState]):
    """
    Upsert multiple card states in a single transaction.

    Keyed by (user_id, word_id); saving the same state twice leaves the
    row unchanged apart from updated_at.

    Args:
        user_id: Learner the states belong to
        states: Dict of word_id -> CardState
    """
    if not states:
        return

    now = utc_now()
    session = get_session()
    try:
        for word_id, state in states.items():
            db_card = session.query(CardSrsModel).filter(
                CardSrsModel.user_id == user_id,
                CardSrsModel.word_id == word_id
            ).first()

            if db_card is None:
                db_card = CardSrsModel(user_id=user_id, word_id=word_id)
                session.add(db_card)
            _apply_card_state(db_card, state, now)

        session.commit()
        logger.debug("Saved %d card states for user=%s", len(states), user_id)
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---- Daily Counter ----

def load_daily_counter(user_id: str, today: str) -> Optional[DailyIntroductionCounter]:
    """
    Load today's new-card counter.

    Returns:
        The stored counter for today, or None if nothing was stored today
    """
    session = get_session()
    try:
        row = session.query(DailyCounterModel).filter(
            DailyCounterModel.user_id == user_id,
            DailyCounterModel.date == today
        ).first()

        if row is None:
            return None
        if row.new_introduced is None or row.new_introduced < 0:
            logger.warning("Resetting corrupt daily counter user=%s date=%s", user_id, today)
            return DailyIntroductionCounter(date=today, new_introduced=0)
        return DailyIntroductionCounter(date=row.date, new_introduced=row.new_introduced)
    finally:
        session.close()


def save_daily_counter(user_id: str, counter: DailyIntroductionCounter):
    """
    Upsert the counter row for (user_id, counter.date).
    """
    session = get_session()
    try:
        row = session.query(DailyCounterModel).filter(
            DailyCounterModel.user_id == user_id,
            DailyCounterModel.date == counter.date
        ).first()

        if row is None:
            row = DailyCounterModel(user_id=user_id, date=counter.date)
            session.add(row)
        row.new_introduced = counter.new_introduced

        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---- Review Events ----

def batch_log_review_events(events: list[dict]):
    """
    Log multiple review events in a single transaction.

    Args:
        events: List of event dicts as produced by scheduler.process_review
            (with user_id and word_id filled in)
    """
    if not events:
        return

    session = get_session()
    try:
        for event in events:
            review_event = ReviewEventModel(
                user_id=event['user_id'],
                word_id=event['word_id'],
                timestamp=ensure_utc(event['timestamp']),
                grade=int(event['grade']),
                was_new=bool(event.get('was_new', False)),
                repetitions_before=event.get('repetitions_before'),
                ease_before=event.get('ease_before'),
                interval_before=event.get('interval_before'),
                repetitions_after=event['repetitions_after'],
                ease_after=event['ease_after'],
                interval_after=event['interval_after'],
                due_at_after=ensure_utc(event['due_at_after']),
                session_id=event.get('session_id'),
                session_position=event.get('session_position'),
                mode=event.get('mode')
            )
            session.add(review_event)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def _event_to_dict(event: ReviewEventModel) -> dict:
    return {
        "id": event.id,
        "user_id": event.user_id,
        "word_id": event.word_id,
        "timestamp": ensure_utc(event.timestamp),
        "grade": event.grade,
        "was_new": event.was_new,
        "repetitions_before": event.repetitions_before,
        "ease_before": event.ease_before,
        "interval_before": event.interval_before,
        "repetitions_after": event.repetitions_after,
        "ease_after": event.ease_after,
        "interval_after": event.interval_after,
        "due_at_after": ensure_utc(event.due_at_after),
        "session_id": event.session_id,
        "session_position": event.session_position,
        "mode": event.mode,
    }


def get_recent_events(user_id: str, limit: int = 10) -> list[dict]:
    """
    Get recent review events (newest first).
    """
    session = get_session()
    try:
        events = session.query(ReviewEventModel).filter(
            ReviewEventModel.user_id == user_id
        ).order_by(
            ReviewEventModel.timestamp.desc(),
            ReviewEventModel.id.desc()
        ).limit(limit).all()

        return [_event_to_dict(event) for event in events]
    finally:
        session.close()


def get_review_events(user_id: str, since: Optional[datetime] = None) -> list[dict]:
    """
    Get all review events for a learner (oldest first), optionally since a time.
    """
    session = get_session()
    try:
        query = session.query(ReviewEventModel).filter(
            ReviewEventModel.user_id == user_id
        )
        if since is not None:
            query = query.filter(ReviewEventModel.timestamp >= ensure_utc(since))
        events = query.order_by(ReviewEventModel.timestamp.asc(), ReviewEventModel.id.asc()).all()

        return [_event_to_dict(event) for event in events]
    finally:
        session.close()


# ---- Review Flags ----

def set_review_flag(user_id: str, word_id: str, flag: str) -> dict:
    """
    Flag a word as "again" or "hard" (replaces any existing flag).

    Raises:
        ValueError: if word_id is empty or flag is not "again"/"hard"
    """
    word_id = (word_id or "").strip()
    flag = (flag or "").strip().lower()
    if not word_id or flag not in REVIEW_FLAGS:
        raise ValueError("word_id and flag ('again' or 'hard') required")

    session = get_session()
    try:
        row = session.query(ReviewFlagModel).filter(
            ReviewFlagModel.user_id == user_id,
            ReviewFlagModel.word_id == word_id
        ).first()

        if row is None:
            row = ReviewFlagModel(user_id=user_id, word_id=word_id)
            session.add(row)
        row.flag = flag
        row.created_at = utc_now()

        session.commit()
        return {"word_id": word_id, "flag": flag}
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_review_flags(user_id: str) -> list[dict]:
    """
    Get a learner's flags, newest first.
    """
    session = get_session()
    try:
        rows = session.query(ReviewFlagModel).filter(
            ReviewFlagModel.user_id == user_id
        ).order_by(ReviewFlagModel.created_at.desc()).all()

        return [
            {"word_id": row.word_id, "flag": row.flag, "created_at": ensure_utc(row.created_at)}
            for row in rows
        ]
    finally:
        session.close()


def clear_review_flag(user_id: str, word_id: str) -> bool:
    """
    Remove a flag. Returns True if a flag was deleted.
    """
    word_id = (word_id or "").strip()
    if not word_id:
        raise ValueError("word_id required")

    session = get_session()
    try:
        deleted = session.query(ReviewFlagModel).filter(
            ReviewFlagModel.user_id == user_id,
            ReviewFlagModel.word_id == word_id
        ).delete()
        session.commit()
        return deleted > 0
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
