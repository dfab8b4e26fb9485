"""SQLite database utilities."""

from __future__ import annotations

import sqlite3
from pathlib import Path


class DatabaseManager:
    """Shared database connection manager.

    Uses singleton pattern so every token store in the process writes
    through one connection. Supports the context manager protocol for
    automatic connection cleanup.
    """

    _instance = None

    def __new__(cls, db_path: Path):
        """Create or return existing DatabaseManager instance.

        Args:
            db_path: Absolute path or project-relative path to database file.

        Returns:
            DatabaseManager singleton instance.
        """
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.conn = ensure_db(db_path)
            init_schema(cls._instance.conn)
        return cls._instance

    def get_connection(self) -> sqlite3.Connection:
        return self.conn

    def close(self) -> None:
        """Close the database connection and reset singleton instance."""
        if hasattr(self, "conn") and self.conn:
            self.conn.close()
            type(self)._instance = None

    def __enter__(self) -> DatabaseManager:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def ensure_db(db_path: Path) -> sqlite3.Connection:
    """Ensure database file exists and return connection.

    Raises:
        OSError: If directory creation fails.
        sqlite3.Error: If database connection fails.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(str(db_path), check_same_thread=False)


def init_schema(conn: sqlite3.Connection) -> None:
    """Initialize the continuation token schema."""
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS pagination_tokens (
          session_id TEXT PRIMARY KEY,
          encoded_query TEXT NOT NULL,
          vars TEXT NOT NULL,
          updated_at INTEGER NOT NULL DEFAULT (
            CAST(strftime('%s','now') AS INTEGER)
          )
        );

        CREATE INDEX IF NOT EXISTS idx_tokens_updated
          ON pagination_tokens(updated_at);
    """)
    conn.commit()
