"""Data Access Layer for the single persisted preference store."""

from __future__ import annotations

from pathlib import Path
import sqlite3


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn
