"""
Merging local (device cache) and remote (database) SRS state.

Both sources hold card states and a daily counter. They are merged once at
load time with a fixed precedence: remote wins for any key present in both.
There are no per-row timestamps in the comparison, so a stale remote copy
overrides newer local progress; find_regressions reports those keys so the
caller can surface them.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.srs.daily_counter import DailyIntroductionCounter, roll_over
from core.srs.memory_state import CardState, ensure_utc
from core.srs.store import SrsStore

logger = logging.getLogger(__name__)


def merge_card_states(
    local: dict[str, CardState],
    remote: dict[str, CardState]
) -> dict[str, CardState]:
    """
    Union of both maps; remote overrides local for matching word_ids.
    """
    merged = dict(local)
    merged.update(remote)
    return merged


def merge_daily_counter(
    local: Optional[DailyIntroductionCounter],
    remote: Optional[DailyIntroductionCounter],
    today: str
) -> DailyIntroductionCounter:
    """
    Pick today's counter: remote if it has one for today, else local.
    """
    if remote is not None and remote.date == today:
        return remote
    return roll_over(local, today)


def find_regressions(
    local: dict[str, CardState],
    remote: dict[str, CardState]
) -> list[str]:
    """
    Word ids where the remote state (which wins the merge) is behind local.

    "Behind" means the remote copy is due earlier and has fewer repetitions,
    i.e. accepting it would undo reviews only the local device has seen.
    """
    regressions = []
    for word_id, remote_state in remote.items():
        local_state = local.get(word_id)
        if local_state is None:
            continue
        if (
            ensure_utc(remote_state.due_at) < ensure_utc(local_state.due_at)
            and remote_state.repetitions < local_state.repetitions
        ):
            regressions.append(word_id)
    return sorted(regressions)


def merge_stores(local: SrsStore, remote: SrsStore, today: str) -> SrsStore:
    """
    Merge a locally cached store with the store loaded from the server.
    """
    regressions = find_regressions(local.per_card, remote.per_card)
    if regressions:
        logger.warning(
            "Remote SRS state is behind local for %d cards; remote wins: %s",
            len(regressions), regressions[:10]
        )

    return SrsStore(
        per_card=merge_card_states(local.per_card, remote.per_card),
        daily=merge_daily_counter(local.daily, remote.daily, today),
    )
