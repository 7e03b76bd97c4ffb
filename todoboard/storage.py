"""
Local storage backends (string key → string value).

The todo store keeps its whole state as one serialized blob under a single
key, the way a browser origin keeps it in localStorage. Two backends:

  SQLiteLocalStorage  - durable, one row per key in a SQLite file
  MemoryLocalStorage  - process-local dict, nothing survives the process
"""
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Protocol


class LocalStorage(Protocol):
    """Minimal key/value contract the todo store persists through."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection in WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


class SQLiteLocalStorage:
    """SQLite-backed key/value table."""

    def __init__(self, db_path: str):
        """Create the parent directory and the table if needed."""
        self.db_path = str(db_path)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self):
        with _connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS local_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def get_item(self, key: str) -> Optional[str]:
        with _connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM local_storage WHERE key = ? LIMIT 1",
                (key,)
            ).fetchone()
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        """Upsert a value. sqlite3 errors propagate to the caller."""
        now = datetime.now(timezone.utc).isoformat()
        with _connect(self.db_path) as conn:
            conn.execute("""
                INSERT INTO local_storage (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
            """, (key, value, now))
            conn.commit()

    def remove_item(self, key: str) -> None:
        with _connect(self.db_path) as conn:
            conn.execute("DELETE FROM local_storage WHERE key = ?", (key,))
            conn.commit()


class MemoryLocalStorage:
    """Dict-backed storage for isolated stores."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)
