import random
from datetime import timedelta, timezone
from unittest.mock import MagicMock

import pytest

from core import session as session_module
from core.session import StudySession, load_learner_store
from core.session_builders import QueueMode
from core.srs import local_cache
from core.srs.constants import Grade
from core.srs.daily_counter import DailyIntroductionCounter
from core.srs.errors import InvalidGradeError
from core.srs.store import SrsStore


TODAY = "2026-03-01"


class FakeClock:
    def __init__(self, start):
        self.current = start

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock(now):
    return FakeClock(now)


def _session(deck, store=None, clock=None, **kwargs):
    return StudySession(
        "alice",
        deck,
        store if store is not None else SrsStore(),
        rng=random.Random(3),
        clock=clock,
        **kwargs,
    )


def test_start_builds_queue_and_picks_a_card(clock):
    study = _session(["a", "b", "c"], clock=clock)
    study.start()
    assert sorted(study.queue) == ["a", "b", "c"]
    assert study.current in {"a", "b", "c"}
    assert study.session_id is not None
    assert study.store.daily == DailyIntroductionCounter(TODAY, 0)


def test_empty_deck_has_no_current_card(clock):
    study = _session([], clock=clock)
    study.start()
    assert study.current is None
    with pytest.raises(RuntimeError):
        study.grade("good")


def test_invalid_grade_is_rejected_before_any_change(clock):
    study = _session(["a"], clock=clock)
    study.start()
    with pytest.raises(InvalidGradeError):
        study.grade("perfect")
    assert study.store.per_card == {}
    assert study.pending_events == []


def test_first_grade_counts_a_new_introduction(clock):
    study = _session(["a", "b"], clock=clock)
    study.start()
    card = study.current

    state = study.grade("good")

    assert state.interval_days == 1
    assert study.store.get(card) == state
    assert study.store.daily == DailyIntroductionCounter(TODAY, 1)
    assert study.counter_dirty
    assert study.stats.reviewed == 1
    assert study.stats.correct == 1


def test_regrading_a_known_card_does_not_count(clock):
    study = _session(["a"], clock=clock)
    study.start()
    study.grade(Grade.AGAIN)
    clock.advance(minutes=10)
    study.grade(Grade.GOOD)
    assert study.store.daily.new_introduced == 1
    assert study.stats.accuracy == 50


def test_again_card_falls_back_to_whole_deck_until_due(clock):
    study = _session(["a"], clock=clock)
    study.start()
    study.grade("again")
    # nothing due and no new cards left: the deck itself is presented
    assert study.queue == ["a"]
    assert study.due_count == 0
    clock.advance(minutes=10)
    assert study.due_count == 1


def test_new_cards_stop_at_the_daily_cap(clock):
    deck = [f"w{i}" for i in range(5)]
    study = _session(deck, clock=clock, new_daily_cap=2)
    study.start()
    assert len(study.queue) == 2

    study.grade("good")
    study.grade("good")

    assert study.store.daily.new_introduced == 2
    # both introduced cards are scheduled for tomorrow, the cap is used up
    assert study.queue == deck


def test_event_fields_are_filled_in(clock):
    study = _session(["a", "b"], clock=clock, mode=QueueMode.RANDOM)
    study.start()
    first = study.current
    study.grade("easy")
    study.grade("hard")

    events = study.pending_events
    assert [e["session_position"] for e in events] == [0, 1]
    assert events[0]["word_id"] == first
    assert all(e["user_id"] == "alice" for e in events)
    assert all(e["mode"] == "random" for e in events)
    assert all(e["session_id"] == study.session_id for e in events)


def test_linear_mode_walks_the_deck(clock):
    study = _session(["a", "b", "c"], clock=clock, mode="linear")
    study.start()
    start = study.index
    study.grade("good")
    assert study.index == (start + 1) % 3


def test_flush_writes_buffers_once(clock):
    study = _session(["a", "b"], clock=clock)
    study.start()
    study.grade("good")

    save_states, save_counter, log_events = MagicMock(), MagicMock(), MagicMock()
    study.flush(save_states=save_states, save_counter=save_counter, log_events=log_events)

    save_states.assert_called_once()
    user_id, states = save_states.call_args.args
    assert user_id == "alice"
    assert len(states) == 1
    save_counter.assert_called_once_with("alice", DailyIntroductionCounter(TODAY, 1))
    assert len(log_events.call_args.args[0]) == 1

    study.flush(save_states=save_states, save_counter=save_counter, log_events=log_events)
    assert save_states.call_count == 1
    assert save_counter.call_count == 1
    assert log_events.call_count == 1


def test_failed_flush_keeps_buffers(clock):
    study = _session(["a"], clock=clock)
    study.start()
    study.grade("good")

    failing = MagicMock(side_effect=RuntimeError("database unavailable"))
    with pytest.raises(RuntimeError):
        study.flush(save_states=failing, save_counter=MagicMock(), log_events=MagicMock())

    assert len(study.pending_states) == 1
    assert len(study.pending_events) == 1
    assert study.counter_dirty
    assert study.store.get("a").repetitions == 1


def test_end_flushes_and_returns_stats(clock):
    study = _session(["a"], clock=clock)
    study.start()
    study.grade("good")

    log_events = MagicMock()
    stats = study.end(save_states=MagicMock(), save_counter=MagicMock(), log_events=log_events)

    assert stats.reviewed == 1
    assert stats.accuracy == 100
    log_events.assert_called_once()
    assert study.current is None


def test_session_against_sqlite(sqlite_db, clock):
    study = _session(["a", "b"], clock=clock)
    study.start()
    card = study.current
    study.grade("good")
    study.end()

    store = load_learner_store("alice", TODAY)
    assert store.get(card).repetitions == 1
    assert store.daily == DailyIntroductionCounter(TODAY, 1)


def test_load_learner_store_offline(tmp_path, make_state):
    path = tmp_path / "srs.json"
    local_cache.save_store(path, SrsStore(per_card={"a": make_state()}))

    store = load_learner_store("alice", TODAY, cache_path=path, remote=False)
    assert list(store.per_card) == ["a"]
    assert store.daily == DailyIntroductionCounter(TODAY, 0)


def test_load_learner_store_remote_wins(tmp_path, monkeypatch, make_state):
    path = tmp_path / "srs.json"
    local_cache.save_store(path, SrsStore(
        per_card={"a": make_state(repetitions=1), "b": make_state(repetitions=1)},
        daily=DailyIntroductionCounter(TODAY, 9),
    ))
    monkeypatch.setattr(
        session_module.database, "load_card_states",
        lambda user_id: {"a": make_state(repetitions=4)}
    )
    monkeypatch.setattr(session_module.database, "load_daily_counter", lambda user_id, today: None)

    store = load_learner_store("alice", TODAY, cache_path=path)

    assert store.get("a").repetitions == 4
    assert store.get("b").repetitions == 1
    assert store.daily == DailyIntroductionCounter(TODAY, 9)


def _offline_writers():
    return {"save_states": MagicMock(), "save_counter": MagicMock(), "log_events": MagicMock()}


def test_end_writes_local_cache_for_offline_reload(tmp_path, clock):
    path = tmp_path / "srs.json"
    store = load_learner_store("alice", TODAY, cache_path=path, remote=False)
    study = _session(["a"], store=store, clock=clock, cache_path=path)
    study.start()
    study.grade("good")
    study.end(**_offline_writers())

    reloaded = load_learner_store("alice", TODAY, cache_path=path, remote=False)

    assert reloaded.get("a").repetitions == 1
    assert reloaded.get("a").last_grade == Grade.GOOD
    assert reloaded.daily == DailyIntroductionCounter(TODAY, 1)


def test_local_cache_written_even_if_database_write_fails(tmp_path, clock):
    path = tmp_path / "srs.json"
    study = _session(["a"], clock=clock, cache_path=path)
    study.start()
    study.grade("easy")

    writers = _offline_writers()
    writers["save_states"].side_effect = RuntimeError("database unavailable")
    with pytest.raises(RuntimeError):
        study.flush(**writers)

    assert local_cache.load_store(path, TODAY).get("a").interval_days == 2
    assert len(study.pending_states) == 1


def test_session_without_cache_path_writes_no_file(tmp_path, clock):
    study = _session(["a"], clock=clock)
    study.start()
    study.grade("good")
    study.end(**_offline_writers())
    assert list(tmp_path.iterdir()) == []


def test_counter_day_follows_configured_timezone(monkeypatch, now):
    monkeypatch.setenv("SRS_TIMEZONE", "Asia/Shanghai")
    late_evening_utc = FakeClock(now.replace(hour=23, minute=30))

    study = _session(["a"], clock=late_evening_utc)
    study.start()
    study.grade("good")

    assert study.today == "2026-03-02"
    assert study.store.daily == DailyIntroductionCounter("2026-03-02", 1)


def test_explicit_timezone_overrides_config(monkeypatch, now):
    monkeypatch.setenv("SRS_TIMEZONE", "Asia/Shanghai")
    late_evening_utc = FakeClock(now.replace(hour=23, minute=30))

    study = _session(["a"], clock=late_evening_utc, tz=timezone.utc)
    assert study.today == TODAY
