"""
Scheduler - SRS Algorithm Logic

Pure scheduling and state updates (no database calls).

Main workflow:
1. Load card state (caller's responsibility, None for a new card)
2. Apply the transition rule for the grade
3. Return the next card state (+ event data dict for process_review)

This module handles ONLY the algorithm logic.
Database I/O is handled by the database module.
"""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Optional, Tuple

from core.srs import memory_state
from core.srs.constants import (
    Grade,
    AGAIN_DELAY_MINUTES,
    EASE_DELTA,
    EASY_BONUS,
    FIRST_INTERVAL,
    HARD_INTERVAL_FACTOR,
    MAX_EASE,
    MIN_EASE,
    SECOND_INTERVAL,
)


def compute_next_state(
    current: Optional[memory_state.CardState],
    grade: Grade,
    now: Optional[datetime] = None
) -> memory_state.CardState:
    """
    Compute the next card state after a graded review.

    Rules by grade:
    - AGAIN: repetitions -> 0, ease -0.2, interval -> 0, due in 10 minutes
    - HARD:  repetitions unchanged, ease -0.15,
             interval 1 for the first two reps, else interval * 1.2
    - GOOD:  repetitions +1, ease +0.1, interval 1 / 6 / interval * ease
    - EASY:  repetitions +1, ease +0.15, interval 2 / 7 / interval * (ease + 0.15)

    "First" and "second" refer to the repetition count before this review.
    Interval growth uses the ease after this review's adjustment.
    Ease is clamped to [MIN_EASE, MAX_EASE].

    Args:
        current: Current state, or None if the card was never graded
        grade: Validated grade (see validation.parse_grade)
        now: Review timestamp (defaults to now)

    Returns:
        New CardState; the input is never modified
    """
    if now is None:
        now = memory_state.utc_now()
    now = memory_state.ensure_utc(now)

    base = current if current is not None else memory_state.initialize_new_card(now)
    repetitions = base.repetitions
    interval = base.interval_days
    ease = _clamp_ease(base.ease + EASE_DELTA[grade])

    if grade == Grade.AGAIN:
        return memory_state.CardState(
            repetitions=0,
            ease=ease,
            interval_days=0,
            due_at=now + timedelta(minutes=AGAIN_DELAY_MINUTES),
            last_grade=grade,
        )

    if grade == Grade.HARD:
        if repetitions <= 1:
            interval = 1
        else:
            interval = max(1, memory_state.round_half_up(interval * HARD_INTERVAL_FACTOR))
    else:
        if repetitions == 0:
            interval = FIRST_INTERVAL[grade]
        elif repetitions == 1:
            interval = SECOND_INTERVAL[grade]
        else:
            factor = ease + EASY_BONUS if grade == Grade.EASY else ease
            interval = max(1, memory_state.round_half_up(interval * factor))
        repetitions += 1

    return memory_state.CardState(
        repetitions=repetitions,
        ease=ease,
        interval_days=interval,
        due_at=now + timedelta(days=interval),
        last_grade=grade,
    )


def process_review(
    current: Optional[memory_state.CardState],
    grade: Grade,
    timestamp: Optional[datetime] = None
) -> Tuple[memory_state.CardState, dict]:
    """
    Process a review and return the next card state + event data.

    No database calls. Caller is responsible for:
    1. Loading the card state
    2. Saving the returned state
    3. Persisting the event

    Args:
        current: Current state, or None for a new card
        grade: Validated grade
        timestamp: Review timestamp (defaults to now)

    Returns:
        Tuple of (next_state, event_data_dict)
        event_data_dict is ready to pass to database.batch_log_review_events()
        once the caller has filled in user_id and word_id
    """
    if timestamp is None:
        timestamp = memory_state.utc_now()
    timestamp = memory_state.ensure_utc(timestamp)

    next_state = compute_next_state(current, grade, timestamp)

    event_data = {
        'user_id': None,  # Set by caller
        'word_id': None,  # Set by caller
        'timestamp': timestamp,
        'grade': grade,
        'was_new': current is None,
        'repetitions_before': current.repetitions if current else None,
        'ease_before': current.ease if current else None,
        'interval_before': current.interval_days if current else None,
        'repetitions_after': next_state.repetitions,
        'ease_after': next_state.ease,
        'interval_after': next_state.interval_days,
        'due_at_after': next_state.due_at,
        'session_id': None,  # Set by caller if needed
        'session_position': None,  # Set by caller if needed
        'mode': None  # Set by caller if needed
    }

    return next_state, event_data


def _clamp_ease(ease: float) -> float:
    return min(MAX_EASE, max(MIN_EASE, ease))
