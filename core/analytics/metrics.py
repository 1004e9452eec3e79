"""
Metric computations for review analytics.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Mapping, Optional

import pandas as pd

from core.analytics.constants import (
    GRADE_LABELS,
    UNCATEGORIZED_ID,
    UNCATEGORIZED_LABEL,
)


def count_by_grade(events_df: pd.DataFrame) -> pd.Series:
    """
    Review count per grade label, in Again/Hard/Good/Easy order (zeros kept).
    """
    labels = list(GRADE_LABELS.values())
    if events_df.empty:
        return pd.Series(0, index=labels, dtype="int64")

    counts = events_df["grade"].map(GRADE_LABELS).value_counts()
    return counts.reindex(labels, fill_value=0).astype("int64")


def count_by_mode(events_df: pd.DataFrame) -> pd.Series:
    """
    Review count per queue mode, most used first.
    """
    if events_df.empty:
        return pd.Series(dtype="int64")
    return events_df["mode"].value_counts().astype("int64")


def count_by_category(
    events_df: pd.DataFrame,
    word_categories: Mapping[str, tuple[str, str]]
) -> pd.DataFrame:
    """
    Review count per word category.

    Args:
        events_df: Review events
        word_categories: word_id -> (category_id, category_name);
            words without an entry are grouped as uncategorized

    Returns:
        DataFrame with columns id, name, count (descending count)
    """
    if events_df.empty:
        return pd.DataFrame(columns=["id", "name", "count"])

    default = (UNCATEGORIZED_ID, UNCATEGORIZED_LABEL)
    pairs = events_df["word_id"].map(lambda word_id: word_categories.get(word_id, default))
    df = pd.DataFrame(pairs.tolist(), columns=["id", "name"])
    grouped = df.groupby(["id", "name"]).size().reset_index(name="count")
    grouped["count"] = grouped["count"].astype("int64")
    return grouped.sort_values(["count", "name"], ascending=[False, True]).reset_index(drop=True)


def count_recent(
    events_df: pd.DataFrame,
    days: int,
    now: Optional[datetime] = None
) -> int:
    """
    Number of reviews within the last `days` days (rolling window).
    """
    if events_df.empty:
        return 0
    now_ts = pd.Timestamp(now) if now is not None else pd.Timestamp.now(tz="UTC")
    if now_ts.tzinfo is None:
        now_ts = now_ts.tz_localize("UTC")
    since = now_ts - timedelta(days=days)
    return int((events_df["timestamp"] >= since).sum())
