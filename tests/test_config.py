from pathlib import Path

import pytest

from core import config
from core.srs.constants import NEW_DAILY_CAP


def test_database_url_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(ValueError):
        config.get_database_url()


def test_database_url_test_mode(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@host/learning_db")
    monkeypatch.setenv("TEST_MODE", "true")
    assert config.get_database_url() == "postgresql://u:p@host/test_learning_db"

    monkeypatch.setenv("TEST_MODE", "false")
    assert config.get_database_url() == "postgresql://u:p@host/learning_db"


def test_default_user_id(monkeypatch):
    monkeypatch.delenv("DEFAULT_USER_ID", raising=False)
    assert config.get_default_user_id() == "local"
    monkeypatch.setenv("DEFAULT_USER_ID", "alice")
    assert config.get_default_user_id() == "alice"


def test_timezone(monkeypatch):
    monkeypatch.delenv("SRS_TIMEZONE", raising=False)
    assert config.get_timezone().key == "UTC"

    monkeypatch.setenv("SRS_TIMEZONE", "Asia/Shanghai")
    assert config.get_timezone().key == "Asia/Shanghai"

    monkeypatch.setenv("SRS_TIMEZONE", "Mars/Olympus_Mons")
    with pytest.raises(ValueError):
        config.get_timezone()


@pytest.mark.parametrize("raw,expected", [(None, NEW_DAILY_CAP), ("", NEW_DAILY_CAP), ("20", 20), ("-5", 0)])
def test_new_daily_cap(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("SRS_NEW_DAILY_CAP", raising=False)
    else:
        monkeypatch.setenv("SRS_NEW_DAILY_CAP", raw)
    assert config.get_new_daily_cap() == expected


def test_new_daily_cap_must_be_integer(monkeypatch):
    monkeypatch.setenv("SRS_NEW_DAILY_CAP", "lots")
    with pytest.raises(ValueError):
        config.get_new_daily_cap()


def test_cache_path(monkeypatch, tmp_path):
    monkeypatch.delenv("SRS_CACHE_PATH", raising=False)
    assert config.get_cache_path() == config.DEFAULT_CACHE_PATH

    monkeypatch.setenv("SRS_CACHE_PATH", str(tmp_path / "cache.json"))
    assert config.get_cache_path() == Path(tmp_path / "cache.json")
