"""
Analytics package exports.
"""

from core.analytics.constants import GRADE_LABELS
from core.analytics.service import build_review_stats, summarize_events
from core.analytics.types import ReviewStats

__all__ = [
    "GRADE_LABELS",
    "build_review_stats",
    "summarize_events",
    "ReviewStats",
]
