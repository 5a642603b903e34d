"""Database schema DDL and initialization.

Tables:
  - metadata: key/value store (theme preference, schema version)

The widget keeps no other persistent state; conversions, currency lists and
rate series live only for the session.
"""

from __future__ import annotations
import sqlite3
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"
CURRENT_SCHEMA_VERSION = 1
SCHEMA_VERSION_KEY = "schema_version"

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""


def init_db(path: Path) -> int:
    """Create tables idempotently and return the schema version.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        cur.execute(METADATA_DDL)
        cur.execute(
            "INSERT INTO metadata (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
            f"updated_at=({BASIC_UTC_NOW})",
            (SCHEMA_VERSION_KEY, str(CURRENT_SCHEMA_VERSION)),
        )
        conn.commit()
        return CURRENT_SCHEMA_VERSION
    finally:
        conn.close()
