"""
Daily new-card introduction counter.

Tracks how many never-seen cards a learner has started today so the queue
builder can enforce the daily cap. The "day" is a calendar date in an
explicit timezone (see core.config.get_timezone), keyed as YYYY-MM-DD.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, tzinfo
from typing import Optional

from core.srs.memory_state import utc_now, ensure_utc


@dataclass(frozen=True)
class DailyIntroductionCounter:
    date: str  # YYYY-MM-DD
    new_introduced: int = 0


def today_key(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> str:
    """
    Calendar date key for the daily counter.

    Args:
        now: Current time (defaults to now)
        tz: Timezone the calendar day is taken in (defaults to UTC)

    Returns:
        Date string in YYYY-MM-DD form
    """
    if now is None:
        now = utc_now()
    now = ensure_utc(now)
    if tz is not None:
        now = now.astimezone(tz)
    return now.date().isoformat()


def roll_over(
    counter: Optional[DailyIntroductionCounter],
    today: str
) -> DailyIntroductionCounter:
    """
    Return a counter valid for `today`.

    A missing counter or one dated another day starts again at zero.
    """
    if counter is None or counter.date != today:
        return DailyIntroductionCounter(date=today, new_introduced=0)
    return counter


def record_introduction(
    counter: Optional[DailyIntroductionCounter],
    today: str
) -> DailyIntroductionCounter:
    """
    Count one more new card introduced today.
    """
    current = roll_over(counter, today)
    return replace(current, new_introduced=current.new_introduced + 1)


def remaining_new(
    counter: Optional[DailyIntroductionCounter],
    today: str,
    cap: int
) -> int:
    """
    Number of new cards that may still be introduced today.
    """
    current = roll_over(counter, today)
    return max(0, cap - current.new_introduced)
