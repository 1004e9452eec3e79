import json
from datetime import timedelta

from core.srs.constants import Grade
from core.srs.daily_counter import DailyIntroductionCounter
from core.srs.local_cache import load_store, save_store
from core.srs.store import SrsStore


TODAY = "2026-03-01"


def test_missing_file_gives_empty_store(tmp_path):
    store = load_store(tmp_path / "missing.json", TODAY)
    assert store.per_card == {}
    assert store.daily == DailyIntroductionCounter(TODAY, 0)


def test_save_then_load(tmp_path, now, make_state):
    path = tmp_path / "cache" / "srs-v1.json"
    state = make_state(repetitions=3, ease=2.2, interval_days=9, due_at=now + timedelta(days=9))
    store = SrsStore(
        per_card={"w1": state},
        daily=DailyIntroductionCounter(date=TODAY, new_introduced=4),
    )

    save_store(path, store)
    loaded = load_store(path, TODAY)

    assert loaded.per_card == {"w1": state}
    assert loaded.daily == DailyIntroductionCounter(TODAY, 4)
    assert not path.with_suffix(".json.tmp").exists()


def test_load_rolls_stale_counter_over(tmp_path):
    path = tmp_path / "srs.json"
    save_store(path, SrsStore(daily=DailyIntroductionCounter(date="2026-02-27", new_introduced=50)))
    assert load_store(path, TODAY).daily == DailyIntroductionCounter(TODAY, 0)


def test_malformed_json_gives_empty_store(tmp_path):
    path = tmp_path / "srs.json"
    path.write_text("{not json", encoding="utf-8")
    store = load_store(path, TODAY)
    assert store.per_card == {}
    assert store.daily.new_introduced == 0


def test_wrong_shape_gives_empty_store(tmp_path):
    path = tmp_path / "srs.json"
    path.write_text(json.dumps({"per_card": ["w1"]}), encoding="utf-8")
    assert load_store(path, TODAY).per_card == {}


def test_corrupt_entry_only_drops_that_card(tmp_path, now, make_state, caplog):
    path = tmp_path / "srs.json"
    save_store(path, SrsStore(per_card={"good": make_state(), "bad": make_state()}))

    data = json.loads(path.read_text(encoding="utf-8"))
    data["per_card"]["bad"]["ease"] = 9.9
    data["per_card"]["unknown_grade"] = dict(data["per_card"]["good"], last_grade=7)
    path.write_text(json.dumps(data), encoding="utf-8")

    store = load_store(path, TODAY)

    assert list(store.per_card) == ["good"]
    assert store.per_card["good"].last_grade == Grade.GOOD
    assert "bad" in caplog.text


def test_corrupt_counter_is_reset(tmp_path, make_state):
    path = tmp_path / "srs.json"
    save_store(path, SrsStore(per_card={"w1": make_state()}))

    data = json.loads(path.read_text(encoding="utf-8"))
    data["daily"] = {"date": TODAY, "new_introduced": -3}
    path.write_text(json.dumps(data), encoding="utf-8")

    store = load_store(path, TODAY)
    assert store.daily == DailyIntroductionCounter(TODAY, 0)
    assert "w1" in store.per_card


def test_invalid_utf8_gives_empty_store(tmp_path, caplog):
    path = tmp_path / "srs.json"
    path.write_bytes(b'{"per_card": {"a": \xff\xfe}}')

    store = load_store(path, TODAY)

    assert store.per_card == {}
    assert store.daily == DailyIntroductionCounter(TODAY, 0)
    assert "Could not read SRS cache" in caplog.text
