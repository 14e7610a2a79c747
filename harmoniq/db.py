"""
Harmoniq Safety - Database connection & schema
"""
import sqlite3
import datetime
import logging

from . import config

logger = logging.getLogger("harmoniq.db")

TS_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


def _get_conn():
    conn = sqlite3.connect(config.DB_PATH, timeout=30, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def _ts() -> str:
    return datetime.datetime.now().strftime(TS_FORMAT)


def _today() -> str:
    return datetime.datetime.now().strftime(DATE_FORMAT)


def parse_dt(value):
    """Parse a stored date or timestamp into a naive datetime.

    Accepts 'YYYY-MM-DD', 'YYYY-MM-DD HH:MM:SS' and ISO-8601 with a 'T'
    separator or trailing 'Z'. Returns None for empty or unparsable input.
    """
    if not value:
        return None
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1]
    try:
        dt = datetime.datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


# ================================================================
# SCHEMA INITIALIZATION
# ================================================================

_SCHEMA_INIT_DONE = False


def init_db(force: bool = False):
    """Create the store and audit tables if missing."""
    global _SCHEMA_INIT_DONE
    if _SCHEMA_INIT_DONE and not force:
        return

    conn = _get_conn()
    c = conn.cursor()

    c.execute("""
        CREATE TABLE IF NOT EXISTS store_items (
            store_key TEXT NOT NULL,
            id TEXT NOT NULL,
            company_id TEXT,
            data TEXT NOT NULL,
            created_at TEXT,
            updated_at TEXT,
            PRIMARY KEY (store_key, id)
        )
    """)
    c.execute("CREATE INDEX IF NOT EXISTS idx_store_items_company ON store_items(store_key, company_id)")

    c.execute("""
        CREATE TABLE IF NOT EXISTS audit_log (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            company_id TEXT,
            user_id TEXT,
            action TEXT NOT NULL,
            entity_type TEXT,
            entity_id TEXT,
            old_values TEXT,
            new_values TEXT,
            ip_address TEXT,
            user_agent TEXT,
            created_at TEXT
        )
    """)

    conn.commit()
    conn.close()
    _SCHEMA_INIT_DONE = True
    logger.info("Schema ready at %s", config.DB_PATH)

