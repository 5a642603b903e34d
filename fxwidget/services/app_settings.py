"""Persisted UI preference backed by the metadata table.

The display theme is the only state that survives a reload. It is process-wide
and is written exclusively through `toggle_ui_theme`; readers fall back to the
default when the key is missing or holds an unknown value.

Metadata keys:
  - theme: str in {light, dark}
"""

from __future__ import annotations
from typing import Optional, Protocol

from fxwidget.db.schema import BASIC_UTC_NOW
from fxwidget.models.constants import DEFAULT_THEME, THEMES

THEME_KEY = "theme"


class _DBConnProto(Protocol):  # minimal protocol to satisfy type checking
    def _connect(self): ...  # noqa: D401


# ------------- Low level helpers -----------------


def _get_metadata_value(db: _DBConnProto, key: str) -> Optional[str]:
    with db._connect() as conn:  # type: ignore[attr-defined]
        cur = conn.cursor()
        cur.execute("SELECT value FROM metadata WHERE key=?", (key,))
        row = cur.fetchone()
        return row[0] if row else None


def _set_metadata_value(db: _DBConnProto, key: str, value: str) -> None:
    with db._connect() as conn:  # type: ignore[attr-defined]
        cur = conn.cursor()
        cur.execute(
            "INSERT INTO metadata(key,value) VALUES(?,?) ON CONFLICT(key) DO UPDATE "
            f"SET value=excluded.value, updated_at=({BASIC_UTC_NOW})",
            (key, value),
        )


# ------------- UI presentation -------------------


def get_ui_theme(db: _DBConnProto) -> str:
    theme = _get_metadata_value(db, THEME_KEY) or DEFAULT_THEME
    return theme if theme in THEMES else DEFAULT_THEME


def toggle_ui_theme(db: _DBConnProto) -> str:
    """Flip light/dark, persist the new value and return it."""
    new_theme = "light" if get_ui_theme(db) == "dark" else "dark"
    _set_metadata_value(db, THEME_KEY, new_theme)
    return new_theme


__all__ = [
    "get_ui_theme",
    "toggle_ui_theme",
]
