"""
In-memory SRS store for one learner.

Holds the per-card states and the daily counter that the scheduler and the
queue builder read. It is passed explicitly to whoever needs it and written
out only at save points.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from core.srs.daily_counter import DailyIntroductionCounter, roll_over
from core.srs.memory_state import CardState


@dataclass
class SrsStore:
    per_card: dict[str, CardState] = field(default_factory=dict)
    daily: Optional[DailyIntroductionCounter] = None

    def get(self, word_id: str) -> Optional[CardState]:
        return self.per_card.get(word_id)

    def put(self, word_id: str, state: CardState) -> None:
        self.per_card[word_id] = state

    def counter_for(self, today: str) -> DailyIntroductionCounter:
        """
        Daily counter rolled over to `today` (stored back on the store).
        """
        self.daily = roll_over(self.daily, today)
        return self.daily
