import pytest
from pydantic import ValidationError

from atm_engine import db
from atm_engine.errors import ConfigurationError
from atm_engine.settings import ATMSettings


def test_defaults(tmp_db_path):
    s = ATMSettings()
    assert s.db_path == tmp_db_path          # picked up from ATM_DB_PATH
    assert s.allow_auto_register is True
    assert s.initial_cash == 5000
    assert s.technicians[0].matches("admin", "admin123")


def test_from_env(monkeypatch):
    monkeypatch.setenv("ATM_INITIAL_CASH", "250")
    monkeypatch.setenv("ATM_INK_COST", "2")
    monkeypatch.setenv("ATM_ALLOW_AUTO_REGISTER", "false")
    monkeypatch.setenv("ATM_TECH_ID", "t1")
    monkeypatch.setenv("ATM_TECH_PASSWORD", "pw")
    monkeypatch.setenv("ATM_LOG_LEVEL", "debug")
    s = ATMSettings.from_env()
    assert s.initial_cash == 250
    assert s.ink_cost == 2
    assert s.allow_auto_register is False
    assert s.log_level == "DEBUG"
    assert len(s.technicians) == 1
    assert s.technicians[0].matches("t1", "pw")
    assert not s.technicians[0].matches("admin", "admin123")


@pytest.mark.parametrize("var, value", [
    ("ATM_INITIAL_CASH", "lots"),
    ("ATM_INITIAL_CASH", "-5"),
    ("ATM_PAPER_COST", "0"),
])
def test_invalid_env(monkeypatch, var, value):
    monkeypatch.setenv(var, value)
    with pytest.raises(ConfigurationError):
        ATMSettings.from_env()


def test_tech_credentials_must_come_in_pairs(monkeypatch):
    monkeypatch.setenv("ATM_TECH_ID", "t1")
    monkeypatch.delenv("ATM_TECH_PASSWORD", raising=False)
    with pytest.raises(ConfigurationError):
        ATMSettings.from_env()


def test_settings_are_frozen():
    s = ATMSettings()
    with pytest.raises(ValidationError):
        s.initial_cash = 1


def test_db_path_default_comes_from_storage_layer(monkeypatch, tmp_path):
    monkeypatch.setenv("ATM_DB_PATH", str(tmp_path / "other.db"))
    assert ATMSettings().db_path == db.default_db_path() == str(tmp_path / "other.db")
