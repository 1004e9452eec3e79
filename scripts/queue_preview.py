"""
Preview today's practice queue for a learner.

Loads the deck from MongoDB and the learner's SRS state (local cache merged
with the database), then prints the queue the trainer would present.
Nothing is written.

Usage:
    python -m scripts.queue_preview [--user ID] [--mode spaced_repetition]
        [--category ID] [--lesson ID] [--seed N] [--offline]
"""

from __future__ import annotations

import argparse
import random

from core import deck_repo
from core.config import (
    get_cache_path,
    get_default_user_id,
    get_new_daily_cap,
    get_timezone,
)
from core.session import load_learner_store
from core.session_builders import QueueMode, build_queue, count_due, effective_queue
from core.srs import today_key
from core.srs.memory_state import utc_now


def main():
    parser = argparse.ArgumentParser(description="Preview today's practice queue")
    parser.add_argument("--user", default=None, help="Learner id (defaults to DEFAULT_USER_ID)")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in QueueMode],
        default=QueueMode.SPACED_REPETITION.value,
        help="Queue mode",
    )
    parser.add_argument("--category", default=None, help="Only words in this category id")
    parser.add_argument("--lesson", default=None, help="Only words in this lesson id")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible shuffle")
    parser.add_argument("--offline", action="store_true", help="Use the local cache only")
    args = parser.parse_args()

    user_id = args.user or get_default_user_id()
    now = utc_now()
    today = today_key(now, get_timezone())
    cap = get_new_daily_cap()

    words = deck_repo.get_all_words(category_id=args.category, lesson_id=args.lesson)
    deck = deck_repo.deck_card_ids(words)
    by_id = {word.id: word for word in words}

    store = load_learner_store(user_id, today, cache_path=get_cache_path(), remote=not args.offline)
    counter = store.counter_for(today)

    queue = build_queue(
        deck,
        store.per_card,
        counter,
        QueueMode(args.mode),
        now=now,
        rng=random.Random(args.seed),
        new_daily_cap=cap,
        today=today,
    )
    presented = effective_queue(queue, deck)

    print("=" * 60)
    print(f"Queue preview for '{user_id}' ({args.mode}, {today})")
    print("=" * 60)
    print(f"Deck size:          {len(deck)}")
    print(f"Due (incl. new):    {count_due(deck, store.per_card, now)}")
    print(f"New introduced:     {counter.new_introduced}/{cap}")
    print(f"Queue length:       {len(queue)}")
    if not queue and deck:
        print("Nothing due and no new cards left today; showing the whole deck.")
    print()

    for position, word_id in enumerate(presented, start=1):
        word = by_id.get(word_id)
        state = store.get(word_id)
        status = "new" if state is None else f"due {state.due_at:%Y-%m-%d %H:%M}"
        label = f"{word.hanzi}  {word.pinyin}  {word.english}" if word else word_id
        print(f"{position:>4}. {label}  [{status}]")


if __name__ == "__main__":
    main()
