"""
Memory State - SRS Card State and Due Status

Defines the per-card scheduling state and the derived "is due" check.

Key concepts:
- Repetitions: consecutive successful reviews since the last lapse
- Ease: multiplier applied to the interval on each successful review
- Interval: days until the card is shown again (0 = relearning)
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import math

from core.srs.constants import Grade, INITIAL_EASE


@dataclass(frozen=True)
class CardState:
    """
    Scheduling state for a single card of a single learner.

    A card without a CardState has never been graded and counts as "new".
    """
    repetitions: int
    ease: float
    interval_days: int
    due_at: datetime  # timezone-aware, UTC
    last_grade: Optional[Grade] = None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a timestamp to timezone-aware UTC.

    Naive datetimes are assumed to already be in UTC (SQLite drops tzinfo).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def initialize_new_card(now: Optional[datetime] = None) -> CardState:
    """
    Baseline state used when grading a card for the first time.

    Args:
        now: Current time (defaults to now)

    Returns:
        CardState with zero repetitions, initial ease and zero interval,
        due immediately
    """
    if now is None:
        now = utc_now()

    return CardState(
        repetitions=0,
        ease=INITIAL_EASE,
        interval_days=0,
        due_at=ensure_utc(now),
        last_grade=None,
    )


def is_due(state: Optional[CardState], now: Optional[datetime] = None) -> bool:
    """
    Check whether a card is eligible for review.

    New cards (no state) are considered due; the daily cap is applied by
    the queue builder, not here.
    """
    if state is None:
        return True
    if now is None:
        now = utc_now()
    return ensure_utc(state.due_at) <= ensure_utc(now)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves rounding up.

    Intervals are always positive, so this matches round-half-away-from-zero.
    Python's built-in round() uses banker's rounding (round(2.5) == 2), which
    would make interval growth drift from the reference behaviour.
    """
    return int(math.floor(value + 0.5))
