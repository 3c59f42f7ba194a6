"""SQLite key-value store for state that must survive between runs."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from gmail_reply_tracker.constants import STATE_DB_PATH

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS properties (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


class StateStore:
    """Persistent string properties, keyed by name."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or STATE_DB_PATH
        self.db_path = Path(self.db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path))
        self._conn.row_factory = sqlite3.Row
        self._create_tables()

    def _create_tables(self) -> None:
        self._conn.executescript(_CREATE_TABLES_SQL)

    # --- public API ---

    def get(self, key: str) -> str | None:
        """Return the stored value for key, or None."""
        row = self._conn.execute(
            "SELECT value FROM properties WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        with self._conn:
            self._conn.execute(
                "INSERT INTO properties (key, value, updated_at) VALUES (?, ?, datetime('now')) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
                (key, value),
            )

    def delete(self, key: str) -> None:
        with self._conn:
            self._conn.execute("DELETE FROM properties WHERE key = ?", (key,))

    def clear(self) -> None:
        """Drop and recreate all tables."""
        self._conn.executescript("DROP TABLE IF EXISTS properties;")
        self._create_tables()

    def get_info(self) -> dict:
        """Return store statistics."""
        file_size = self.db_path.stat().st_size if self.db_path.exists() else 0

        rows = self._conn.execute(
            "SELECT key, length(value) AS size, updated_at FROM properties ORDER BY key"
        ).fetchall()

        return {
            "db_file_size": file_size,
            "keys": {r["key"]: {"size": r["size"], "updated_at": r["updated_at"]} for r in rows},
        }

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # --- context manager ---

    def __enter__(self) -> StateStore:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()
