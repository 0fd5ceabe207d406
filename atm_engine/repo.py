import logging
import sqlite3

from . import db
from .errors import PersistenceError

log = logging.getLogger("repo")

PAPER_KEY = "paper_level"
INK_KEY = "ink_level"
CASH_KEY = "cash_available"
OFFLINE_KEY = "offline"


class StateRepo:
    """Persistence port for device state: consumable levels, vault cash, offline flag."""

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path

    def init(self) -> None:
        try:
            db.init_db(self.db_path)
        except sqlite3.Error as e:
            raise PersistenceError(f"cannot initialise state storage: {e}") from e

    def _load_int(self, key: str, default: int) -> int:
        try:
            raw = db.get_value(key, self.db_path)
        except sqlite3.Error as e:
            log.error("load %s failed: %s", key, e)
            raise PersistenceError(f"cannot load {key}: {e}") from e
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            log.warning("stored %s=%r is not an integer, using %s", key, raw, default)
            return default

    def _save(self, key: str, value: str) -> None:
        try:
            db.put_value(key, value, self.db_path)
        except sqlite3.Error as e:
            log.error("save %s=%s failed: %s", key, value, e)
            raise PersistenceError(f"cannot save {key}: {e}") from e

    def load_paper_level(self, default: int) -> int:
        return self._load_int(PAPER_KEY, default)

    def load_ink_level(self, default: int) -> int:
        return self._load_int(INK_KEY, default)

    def save_paper_level(self, level: int) -> None:
        self._save(PAPER_KEY, str(level))

    def save_ink_level(self, level: int) -> None:
        self._save(INK_KEY, str(level))

    def load_cash(self, default: int) -> int:
        return self._load_int(CASH_KEY, default)

    def save_cash(self, amount: int) -> None:
        self._save(CASH_KEY, str(amount))

    def load_offline(self) -> bool:
        return self._load_int(OFFLINE_KEY, 0) == 1

    def save_offline(self, offline: bool) -> None:
        self._save(OFFLINE_KEY, "1" if offline else "0")
