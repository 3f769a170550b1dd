"""SQLite-backed record of every joke seen, per language."""

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from jokebox.config import Log, quiet
from jokebox.errors import StoreError


SCHEMA = """
CREATE TABLE IF NOT EXISTS jokes (
    id INTEGER PRIMARY KEY,
    joke TEXT NOT NULL,
    language TEXT NOT NULL DEFAULT 'en',
    shown INTEGER NOT NULL DEFAULT 0,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS sync_meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
);
"""

# Needs the migrated columns, so it runs after MIGRATIONS.
INDEXES = "CREATE INDEX IF NOT EXISTS idx_jokes_language_shown ON jokes(language, shown)"

# Columns added since the single-language table (id, joke, created_at).
MIGRATIONS = [
    "ALTER TABLE jokes ADD COLUMN language TEXT NOT NULL DEFAULT 'en'",
    "ALTER TABLE jokes ADD COLUMN shown INTEGER NOT NULL DEFAULT 0",
]

_COLUMNS = "id, joke, language, shown, created_at"


@dataclass(frozen=True)
class JokeRecord:
    id: int
    text: str
    language: str
    shown: bool
    created_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "JokeRecord":
        return cls(
            id=row["id"],
            text=row["joke"],
            language=row["language"],
            shown=bool(row["shown"]),
            created_at=row["created_at"],
        )


class JokeStore:
    """Passive data holder; callers decide when rows change.

    Use as a context manager so the connection is closed on every exit path.
    """

    def __init__(self, path: Union[str, Path], log: Log = quiet):
        self.path = str(path)
        self.log = log
        try:
            self._conn = sqlite3.connect(self.path, timeout=5, isolation_level=None)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to open database {self.path}: {e}") from e
        self._conn.row_factory = sqlite3.Row

    def __enter__(self) -> "JokeStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # --- Schema ---

    def init_schema(self) -> None:
        """Create tables and upgrade older layouts. Safe to run repeatedly."""
        try:
            self._conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to create tables: {e}") from e

        for statement in MIGRATIONS:
            try:
                self._conn.execute(statement)
                self.log(f"  Migrated store: {statement}")
            except sqlite3.OperationalError as e:
                if "duplicate column name" not in str(e).lower():
                    raise StoreError(f"Failed to migrate store: {e}") from e

        self._execute(INDEXES)

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StoreError(f"Database error: {e}") from e

    def _fetchone(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        try:
            return self._execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Database error: {e}") from e

    # --- Jokes ---

    def exists(self, text: str, language: str) -> bool:
        row = self._fetchone(
            "SELECT COUNT(*) FROM jokes WHERE joke = ? AND language = ?", (text, language)
        )
        return row[0] > 0

    def insert(self, text: str, language: str, shown: bool) -> int:
        cur = self._execute(
            "INSERT INTO jokes (joke, language, shown) VALUES (?, ?, ?)",
            (text, language, int(shown)),
        )
        return cur.lastrowid

    def pick_unshown(self, language: str) -> Optional[JokeRecord]:
        row = self._fetchone(
            f"SELECT {_COLUMNS} FROM jokes WHERE language = ? AND shown = 0 "
            "ORDER BY RANDOM() LIMIT 1",
            (language,),
        )
        return JokeRecord.from_row(row) if row else None

    def pick_random(self, language: str) -> Optional[JokeRecord]:
        row = self._fetchone(
            f"SELECT {_COLUMNS} FROM jokes WHERE language = ? ORDER BY RANDOM() LIMIT 1",
            (language,),
        )
        return JokeRecord.from_row(row) if row else None

    def mark_shown(self, joke_id: int) -> None:
        self._execute("UPDATE jokes SET shown = 1 WHERE id = ?", (joke_id,))

    def reset_shown(self, language: str) -> None:
        self._execute("UPDATE jokes SET shown = 0 WHERE language = ?", (language,))

    def count(self, language: str, shown: Optional[bool] = None) -> int:
        if shown is None:
            row = self._fetchone("SELECT COUNT(*) FROM jokes WHERE language = ?", (language,))
        else:
            row = self._fetchone(
                "SELECT COUNT(*) FROM jokes WHERE language = ? AND shown = ?",
                (language, int(shown)),
            )
        return row[0]

    # --- Sync metadata ---

    def get_sync_meta(self, key: str) -> Optional[str]:
        row = self._fetchone("SELECT value FROM sync_meta WHERE key = ?", (key,))
        return row["value"] if row else None

    def set_sync_meta(self, key: str, value: str) -> None:
        self._execute(
            """
            INSERT INTO sync_meta (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
            """,
            (key, value),
        )
