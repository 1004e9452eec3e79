"""
SRS - Spaced Repetition Scheduler

Main API for the flashcard trainer.

This package implements an SM-2 style scheduler with:
- Four grades (Again, Hard, Good, Easy)
- A per-card ease factor clamped to [1.3, 3.0]
- Fixed first/second intervals, then multiplicative growth
- A daily cap on newly introduced cards

Quick start:
    from core import srs

    # Initialize database
    srs.init_db()

    # Grade a card (algorithm only, no DB calls)
    next_state = srs.compute_next_state(current_state, srs.Grade.GOOD)

    # Load all states for a learner
    states = srs.load_card_states("local")
"""

# Core scheduler API (algorithm logic)
from core.srs.scheduler import compute_next_state, process_review

# Database API
from core.srs.database import (
    init_db,
    reset_db,
    load_card_state,
    load_card_states,
    save_card_state,
    batch_save_card_states,
    load_daily_counter,
    save_daily_counter,
    batch_log_review_events,
    get_recent_events,
    get_review_events,
    set_review_flag,
    get_review_flags,
    clear_review_flag,
)

# Constants and parameters
from core.srs.constants import (
    Grade,
    INITIAL_EASE,
    MIN_EASE,
    MAX_EASE,
    AGAIN_DELAY_MINUTES,
    NEW_DAILY_CAP,
)

# State and helpers
from core.srs.memory_state import CardState, initialize_new_card, is_due
from core.srs.daily_counter import DailyIntroductionCounter, today_key
from core.srs.store import SrsStore
from core.srs.validation import parse_grade
from core.srs.errors import SrsError, InvalidGradeError, CorruptStateError


__all__ = [
    # Core algorithm
    "compute_next_state",
    "process_review",

    # Database operations
    "init_db",
    "reset_db",
    "load_card_state",
    "load_card_states",
    "save_card_state",
    "batch_save_card_states",
    "load_daily_counter",
    "save_daily_counter",
    "batch_log_review_events",
    "get_recent_events",
    "get_review_events",
    "set_review_flag",
    "get_review_flags",
    "clear_review_flag",

    # Enums
    "Grade",

    # State
    "CardState",
    "initialize_new_card",
    "is_due",
    "DailyIntroductionCounter",
    "today_key",
    "SrsStore",
    "parse_grade",

    # Errors
    "SrsError",
    "InvalidGradeError",
    "CorruptStateError",

    # Parameters
    "INITIAL_EASE",
    "MIN_EASE",
    "MAX_EASE",
    "AGAIN_DELAY_MINUTES",
    "NEW_DAILY_CAP",
]
