"""
Queue Builder - Practice Queue Creation

Turns a deck into an ordered practice queue for one session.

Modes:
1. LINEAR: deck order, untouched (ordered content)
2. RANDOM: whole deck, uniformly shuffled (unordered practice)
3. SPACED_REPETITION: due cards first, then new cards up to the daily cap

Spaced repetition logic:
- Due pool: cards with state and due_at <= now, shuffled
- Fresh pool: cards with no state, shuffled, capped to the cards still
  allowed today (NEW_DAILY_CAP - introduced today)
- Cards scheduled for later are left out
- The cap never applies to due cards
"""

from __future__ import annotations
import logging
import random
from datetime import datetime
from typing import Mapping, Optional, Sequence

from core.srs.constants import NEW_DAILY_CAP
from core.srs.daily_counter import DailyIntroductionCounter, remaining_new, today_key
from core.srs.memory_state import CardState, ensure_utc, utc_now
from core.session_builders.pool_types import QueueMode
from core.session_builders.pool_utils import partition_deck, shuffled, take

logger = logging.getLogger(__name__)


def build_queue(
    deck_cards: Sequence[str],
    per_card_state: Mapping[str, CardState],
    daily_counter: Optional[DailyIntroductionCounter],
    mode: QueueMode,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    new_daily_cap: int = NEW_DAILY_CAP,
    today: Optional[str] = None
) -> list[str]:
    """
    Build the ordered practice queue for a session.

    Args:
        deck_cards: Card ids in deck order
        per_card_state: Map of card id -> CardState (missing = new card)
        daily_counter: Today's introduction counter (a stale date counts as 0)
        mode: Queue construction policy
        now: Current time (defaults to now)
        rng: Randomness source (defaults to a fresh random.Random());
            pass a seeded instance for a deterministic queue
        new_daily_cap: Maximum new cards per day
        today: Date key for the counter (defaults to the UTC date of `now`)

    Returns:
        List of card ids; may be empty (see effective_queue)
    """
    if rng is None:
        rng = random.Random()

    if mode == QueueMode.LINEAR:
        return list(deck_cards)

    if mode == QueueMode.RANDOM:
        return shuffled(deck_cards, rng)

    if mode != QueueMode.SPACED_REPETITION:
        raise ValueError(f"Unknown queue mode: {mode!r}")

    now = ensure_utc(now) if now is not None else utc_now()
    if today is None:
        today = today_key(now)

    pools = partition_deck(deck_cards, per_card_state, now)
    allowed_new = remaining_new(daily_counter, today, new_daily_cap)

    due = shuffled(pools.due, rng)
    fresh = take(shuffled(pools.fresh, rng), allowed_new)

    logger.debug(
        "Queue built: %d due, %d/%d new (allowed %d), %d scheduled later",
        len(due), len(fresh), len(pools.fresh), allowed_new, len(pools.scheduled)
    )
    return due + fresh


def effective_queue(queue: Sequence[str], deck_cards: Sequence[str]) -> list[str]:
    """
    Queue to present: the built queue, or the whole deck when it is empty.

    Keeps a session from stalling once nothing is due and the new-card
    allowance is used up.
    """
    if queue:
        return list(queue)
    return list(deck_cards)
