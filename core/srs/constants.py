"""
SRS Constants and Parameters

All tunable parameters for the spaced-repetition scheduler in one place.
"""

from enum import IntEnum


# ---- Grades ----

class Grade(IntEnum):
    """Learner's self-assessment of a single review."""
    AGAIN = 0   # Forgot, relearn within the session
    HARD = 1    # Recalled with effort
    GOOD = 2    # Recalled normally
    EASY = 3    # Recalled effortlessly


# ---- Ease Factor ----

INITIAL_EASE = 2.5
MIN_EASE = 1.3
MAX_EASE = 3.0

EASE_DELTA = {
    Grade.AGAIN: -0.20,
    Grade.HARD: -0.15,
    Grade.GOOD: +0.10,
    Grade.EASY: +0.15,
}


# ---- Intervals (days) ----

AGAIN_DELAY_MINUTES = 10    # Relearn within the session
HARD_INTERVAL_FACTOR = 1.2
EASY_BONUS = 0.15           # Added to ease when growing an Easy interval

# Fixed intervals for the first and second successful repetition
FIRST_INTERVAL = {
    Grade.GOOD: 1,
    Grade.EASY: 2,
}
SECOND_INTERVAL = {
    Grade.GOOD: 6,
    Grade.EASY: 7,
}


# ---- Queue ----

NEW_DAILY_CAP = 50  # New cards introduced per learner per calendar day
