"""
Study session lifecycle.

A StudySession owns the learner's SrsStore for the duration of a practice
session. It asks the queue builder for the queue, applies each grade through
the scheduler, counts newly introduced cards, and buffers the results until
an explicit save point (flush).

Typical use:
    store = load_learner_store(user_id, today)
    session = StudySession(user_id, deck_card_ids(words), store, cache_path=get_cache_path())
    session.start()
    while session.current is not None:
        session.grade("good")
        ...
    session.end()
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Callable, Optional, Sequence

from core.config import get_timezone
from core.srs import database, local_cache
from core.srs.constants import Grade, NEW_DAILY_CAP
from core.srs.daily_counter import record_introduction, today_key
from core.srs.memory_state import CardState, utc_now
from core.srs.scheduler import process_review
from core.srs.store import SrsStore
from core.srs.sync import merge_stores
from core.srs.validation import parse_grade
from core.session_builders import QueueMode, build_queue, count_due, effective_queue

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    reviewed: int = 0
    correct: int = 0  # Good or Easy

    @property
    def accuracy(self) -> int:
        """Percentage of correct reviews, rounded (0 before any review)."""
        if self.reviewed == 0:
            return 0
        return round(self.correct / self.reviewed * 100)


class StudySession:
    """
    One practice session over a deck for one learner.

    The calendar day for the new-card counter is taken in `tz`, which
    defaults to SRS_TIMEZONE (see core.config.get_timezone). With a
    `cache_path`, every save point also rewrites the local device cache.
    """

    def __init__(
        self,
        user_id: str,
        deck_cards: Sequence[str],
        store: SrsStore,
        mode: QueueMode = QueueMode.SPACED_REPETITION,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
        tz: Optional[tzinfo] = None,
        new_daily_cap: int = NEW_DAILY_CAP,
        cache_path: Optional[Path] = None,
    ):
        self.user_id = user_id
        self.deck_cards = list(deck_cards)
        self.store = store
        self.mode = QueueMode(mode)
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock
        self.tz = tz if tz is not None else get_timezone()
        self.new_daily_cap = new_daily_cap
        self.cache_path = cache_path

        self.session_id: Optional[str] = None
        self.queue: list[str] = []
        self.index = 0
        self.position = 0
        self.stats = SessionStats()

        self.pending_states: dict[str, CardState] = {}
        self.pending_events: list[dict] = []
        self.counter_dirty = False

    # ---- Queue ----

    @property
    def today(self) -> str:
        return today_key(self.clock(), self.tz)

    def _build(self) -> list[str]:
        queue = build_queue(
            self.deck_cards,
            self.store.per_card,
            self.store.daily,
            self.mode,
            now=self.clock(),
            rng=self.rng,
            new_daily_cap=self.new_daily_cap,
            today=self.today,
        )
        return effective_queue(queue, self.deck_cards)

    def start(self) -> None:
        """
        Start a new session: fresh id, stats and queue; random starting card.
        """
        self.session_id = str(uuid.uuid4())
        self.stats = SessionStats()
        self.position = 0
        self.store.counter_for(self.today)
        self.queue = self._build()
        self.index = self.rng.randrange(len(self.queue)) if self.queue else 0
        logger.debug("Session %s started with %d cards", self.session_id, len(self.queue))

    @property
    def current(self) -> Optional[str]:
        if not self.queue:
            return None
        return self.queue[self.index]

    @property
    def due_count(self) -> int:
        return count_due(self.deck_cards, self.store.per_card, self.clock())

    # ---- Grading ----

    def grade(self, value: object) -> CardState:
        """
        Grade the current card and move on.

        The raw value is validated here (InvalidGradeError on bad input).
        A card graded for the first time counts against today's new-card
        allowance before its state is computed.

        Returns:
            The card's new state
        """
        grade = parse_grade(value)
        card_id = self.current
        if card_id is None:
            raise RuntimeError("No card to grade: the deck is empty or the session was not started")

        now = self.clock()
        today = today_key(now, self.tz)
        previous = self.store.get(card_id)

        if previous is None:
            self.store.daily = record_introduction(self.store.daily, today)
            self.counter_dirty = True

        next_state, event_data = process_review(previous, grade, now)
        event_data["user_id"] = self.user_id
        event_data["word_id"] = card_id
        event_data["session_id"] = self.session_id
        event_data["session_position"] = self.position
        event_data["mode"] = self.mode.value

        self.store.put(card_id, next_state)
        self.pending_states[card_id] = next_state
        self.pending_events.append(event_data)

        self.stats.reviewed += 1
        if grade >= Grade.GOOD:
            self.stats.correct += 1
        self.position += 1

        self._advance()
        return next_state

    def _advance(self) -> None:
        previous_length = len(self.queue)
        self.queue = self._build()

        if not self.queue:
            self.index = 0
        elif len(self.queue) != previous_length:
            self.index = self.rng.randrange(len(self.queue))
        elif len(self.queue) <= 1:
            self.index = 0
        else:
            self.index = (self.index + 1) % len(self.queue)

    # ---- Save Points ----

    def flush(
        self,
        save_states: Callable[[str, dict[str, CardState]], None] = database.batch_save_card_states,
        save_counter: Callable = database.save_daily_counter,
        log_events: Callable[[list[dict]], None] = database.batch_log_review_events,
    ) -> None:
        """
        Persist buffered card states, the daily counter and review events.

        The whole store is written to the local cache first (when the
        session has a cache_path) so the device copy stays current even if
        a database write fails.

        If a write fails the exception propagates and the buffers are kept,
        so the caller may retry; in-memory state is already up to date.
        """
        if self.cache_path is not None:
            local_cache.save_store(self.cache_path, self.store)
        if self.pending_states:
            save_states(self.user_id, dict(self.pending_states))
            self.pending_states = {}
        if self.counter_dirty and self.store.daily is not None:
            save_counter(self.user_id, self.store.daily)
            self.counter_dirty = False
        if self.pending_events:
            log_events(list(self.pending_events))
            self.pending_events = []

    def end(self, **flush_kwargs) -> SessionStats:
        """
        Flush and close the session. Returns the final stats.
        """
        self.flush(**flush_kwargs)
        self.queue = []
        self.index = 0
        return self.stats


# ---- Loading ----

def load_learner_store(
    user_id: str,
    today: str,
    cache_path: Optional[Path] = None,
    remote: bool = True,
) -> SrsStore:
    """
    Load a learner's store from the local cache and (optionally) the database.

    When both exist the database copy wins for every card and for today's
    counter (see core.srs.sync).
    """
    local = local_cache.load_store(cache_path, today) if cache_path is not None else SrsStore()
    if not remote:
        local.counter_for(today)
        return local

    remote_store = SrsStore(
        per_card=database.load_card_states(user_id),
        daily=database.load_daily_counter(user_id, today),
    )
    return merge_stores(local, remote_store, today)
