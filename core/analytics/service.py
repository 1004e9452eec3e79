"""
Service layer to assemble a learner's review statistics.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import pandas as pd

from core.analytics.constants import RECENT_WINDOW_DAYS
from core.analytics.metrics import (
    count_by_category,
    count_by_grade,
    count_by_mode,
    count_recent,
)
from core.analytics.queries import load_review_events_df
from core.analytics.types import ReviewStats
from core.schemas import Word


def summarize_events(
    events_df: pd.DataFrame,
    words: Sequence[Word] = (),
    now: Optional[datetime] = None
) -> ReviewStats:
    """
    Compute all review statistics from an events dataframe.
    """
    word_categories = {
        word.id: (word.category.id, word.category.name)
        for word in words
        if word.category is not None
    }

    return ReviewStats(
        total_reviews=int(len(events_df)),
        last_7_days=count_recent(events_df, RECENT_WINDOW_DAYS, now),
        by_grade=count_by_grade(events_df),
        by_mode=count_by_mode(events_df),
        by_category=count_by_category(events_df, word_categories),
    )


def build_review_stats(
    user_id: str,
    words: Sequence[Word] = (),
    now: Optional[datetime] = None
) -> ReviewStats:
    """
    Build review statistics for a learner from the review event log.

    Args:
        user_id: Learner
        words: Deck words, used to attribute reviews to categories
        now: Reference time for the recent-window count
    """
    return summarize_events(load_review_events_df(user_id), words, now)
