"""
Constants for review analytics.
"""

from __future__ import annotations

from typing import Final

from core.srs.constants import Grade


GRADE_LABELS: Final[dict[int, str]] = {
    int(Grade.AGAIN): "Again",
    int(Grade.HARD): "Hard",
    int(Grade.GOOD): "Good",
    int(Grade.EASY): "Easy",
}

RECENT_WINDOW_DAYS: Final[int] = 7

UNCATEGORIZED_ID: Final[str] = ""
UNCATEGORIZED_LABEL: Final[str] = "Uncategorized"

EVENT_COLUMNS: Final[list[str]] = ["word_id", "grade", "mode", "timestamp", "day_utc"]
