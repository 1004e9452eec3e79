"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

import pandas as pd

from core import srs
from core.analytics.constants import EVENT_COLUMNS


def events_to_df(rows: list[dict]) -> pd.DataFrame:
    """
    Normalize raw review event dicts into the analytics dataframe shape.
    """
    if not rows:
        return pd.DataFrame(columns=EVENT_COLUMNS)

    df = pd.DataFrame(rows)
    if df.empty:
        return pd.DataFrame(columns=EVENT_COLUMNS)

    if "mode" not in df.columns:
        df["mode"] = None
    df = df[["word_id", "grade", "mode", "timestamp"]].copy()
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, errors="coerce")
    df["grade"] = pd.to_numeric(df["grade"], errors="coerce")
    df = df.dropna(subset=["word_id", "grade", "timestamp"])
    df["grade"] = df["grade"].astype("int64")
    df["mode"] = df["mode"].fillna("unknown")
    df["day_utc"] = df["timestamp"].dt.floor("D")
    df = df.sort_values("timestamp").reset_index(drop=True)
    return df


def load_review_events_df(user_id: str) -> pd.DataFrame:
    """
    Load all review events for a user into a dataframe.
    """
    return events_to_df(srs.get_review_events(user_id))
