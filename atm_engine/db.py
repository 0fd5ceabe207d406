import os, sqlite3, logging
from contextlib import closing

log = logging.getLogger("db")

def default_db_path() -> str:
    return os.environ.get("ATM_DB_PATH", os.path.join(os.getcwd(), "data", "atm.db"))

def _ensure_parent_dir(path: str):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

def _open_conn(path: str | None = None) -> sqlite3.Connection:
    path = path or default_db_path()
    _ensure_parent_dir(path)
    # autocommit; we control BEGIN/COMMIT in ops
    conn = sqlite3.connect(path, isolation_level=None)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    return conn

def init_db(path: str | None = None):
    with closing(_open_conn(path)) as conn:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS device_state (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
    log.info("DB schema ready at %s", path or default_db_path())

def truncate_all(path: str | None = None):
    with closing(_open_conn(path)) as conn:
        conn.execute("DELETE FROM device_state")

def get_value(key: str, path: str | None = None) -> str | None:
    with closing(_open_conn(path)) as conn:
        row = conn.execute("SELECT value FROM device_state WHERE key=?", (key,)).fetchone()
        return row[0] if row else None

def put_value(key: str, value: str, path: str | None = None) -> None:
    """Upsert one key inside its own transaction."""
    with closing(_open_conn(path)) as conn:
        cur = conn.cursor()
        cur.execute("BEGIN IMMEDIATE")
        try:
            cur.execute(
                "INSERT INTO device_state (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (key, value),
            )
            cur.execute("COMMIT")
            log.debug("db.put key=%s value=%s", key, value)
        except Exception:
            cur.execute("ROLLBACK")
            raise
