"""
Pool utilities for session builders.

These helpers provide shared, minimal primitives for building and reasoning
about session pools without enforcing a single scheduling policy.
"""

from __future__ import annotations
import random
from datetime import datetime
from typing import Mapping, Optional, Sequence, TypeVar

from core.srs.memory_state import CardState, is_due
from core.session_builders.pool_types import DeckPools


T = TypeVar("T")


def partition_deck(
    deck_cards: Sequence[str],
    per_card_state: Mapping[str, CardState],
    now: datetime
) -> DeckPools:
    """
    Split deck cards into due / fresh / scheduled pools (no DB calls).
    """
    pools = DeckPools()
    for card_id in deck_cards:
        state = per_card_state.get(card_id)
        if state is None:
            pools.fresh.append(card_id)
        elif is_due(state, now):
            pools.due.append(card_id)
        else:
            pools.scheduled.append(card_id)
    return pools


def shuffled(items: Sequence[T], rng: random.Random) -> list[T]:
    """
    Uniformly shuffled copy of items.

    random.Random.shuffle is an in-place Fisher-Yates shuffle, so every
    permutation is equally likely; the input is left untouched.
    """
    result = list(items)
    rng.shuffle(result)
    return result


def take(items: Sequence[T], count: int) -> list[T]:
    """
    First `count` items (none for a non-positive count).
    """
    if count <= 0:
        return []
    return list(items[:count])


def count_due(
    deck_cards: Sequence[str],
    per_card_state: Mapping[str, CardState],
    now: Optional[datetime] = None
) -> int:
    """
    Number of deck cards eligible right now (new cards included).
    """
    return sum(1 for card_id in deck_cards if is_due(per_card_state.get(card_id), now))
