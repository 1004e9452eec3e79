"""
Types for review analytics.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class ReviewStats:
    """
    Aggregated review counts for one learner.

    by_grade: index = grade label (Again/Hard/Good/Easy), always all four
    by_mode: index = queue mode value
    by_category: columns id, name, count (sorted by count, descending)
    """
    total_reviews: int
    last_7_days: int
    by_grade: pd.Series
    by_mode: pd.Series
    by_category: pd.DataFrame
