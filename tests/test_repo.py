import os
import sqlite3

import pytest

from atm_engine import db
from atm_engine.errors import PersistenceError
from atm_engine.repo import StateRepo


def test_missing_keys_use_defaults(state):
    assert state.load_paper_level(100) == 100
    assert state.load_ink_level(80) == 80
    assert state.load_cash(5000) == 5000
    assert state.load_offline() is False


def test_values_round_trip(state, tmp_db_path):
    state.save_paper_level(42)
    state.save_ink_level(7)
    state.save_cash(1234)
    state.save_offline(True)

    fresh = StateRepo(tmp_db_path)
    assert fresh.load_paper_level(100) == 42
    assert fresh.load_ink_level(100) == 7
    assert fresh.load_cash(0) == 1234
    assert fresh.load_offline() is True


def test_save_overwrites(state):
    state.save_cash(10)
    state.save_cash(20)
    assert state.load_cash(0) == 20


def test_garbage_value_falls_back_to_default(state, tmp_db_path):
    db.put_value("paper_level", "lots", tmp_db_path)
    assert state.load_paper_level(100) == 100


def test_env_path_is_used_by_default(tmp_db_path):
    assert os.environ["ATM_DB_PATH"] == tmp_db_path
    StateRepo().save_cash(77)
    assert StateRepo(tmp_db_path).load_cash(0) == 77


def test_uninitialised_storage_raises_persistence_error(tmp_path):
    repo = StateRepo(str(tmp_path / "empty.sqlite3"))
    with pytest.raises(PersistenceError):
        repo.load_cash(0)
    with pytest.raises(PersistenceError):
        repo.save_cash(5)


def test_init_creates_parent_dirs(tmp_path):
    path = tmp_path / "nested" / "dir" / "atm.db"
    StateRepo(str(path)).init()
    assert path.exists()
    with sqlite3.connect(path) as conn:
        tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert "device_state" in tables
