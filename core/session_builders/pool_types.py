"""
Typed pool models shared across session builders.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class QueueMode(str, Enum):
    """How a deck is turned into a practice queue."""
    LINEAR = "linear"                          # ordered content, deck order
    SPACED_REPETITION = "spaced_repetition"    # vocabulary, due + capped new
    RANDOM = "random"                          # unordered practice, fresh shuffle


@dataclass
class DeckPools:
    """
    Deck cards partitioned by scheduling status at a given moment.

    Each list keeps deck order; shuffling is the queue builder's job.
    """
    due: list[str] = field(default_factory=list)        # has state, due_at <= now
    fresh: list[str] = field(default_factory=list)      # no stored state
    scheduled: list[str] = field(default_factory=list)  # has state, not yet due
