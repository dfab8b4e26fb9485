"""Continuation token stores keyed by session id."""

from __future__ import annotations

import json
import threading
from typing import TYPE_CHECKING, Protocol

from MindbreezeClient.core.models import PaginationToken
from MindbreezeClient.utils.log import log

if TYPE_CHECKING:
    from MindbreezeClient.storage.db import DatabaseManager


class PaginationTokenStore(Protocol):
    """Storage for the continuation token of each session."""

    def get(self, key: str) -> PaginationToken | None:
        """Return the token stored under ``key``, if any."""
        raise NotImplementedError

    def set(self, key: str, token: PaginationToken | None) -> None:
        """Store ``token`` under ``key``; ``None`` clears it."""
        raise NotImplementedError


class InMemoryTokenStore:
    """Process-local token store."""

    def __init__(self) -> None:
        self._tokens: dict[str, PaginationToken] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> PaginationToken | None:
        with self._lock:
            return self._tokens.get(key)

    def set(self, key: str, token: PaginationToken | None) -> None:
        with self._lock:
            if token is None:
                self._tokens.pop(key, None)
            else:
                self._tokens[key] = token


class SqliteTokenStore:
    """SQLite-backed token store surviving process restarts."""

    def __init__(self, db_manager: DatabaseManager):
        """Initialize token store.

        Args:
            db_manager: Shared database manager instance.
        """
        log.debug("Initializing SqliteTokenStore")
        self.conn = db_manager.get_connection()

    def get(self, key: str) -> PaginationToken | None:
        row = self.conn.execute(
            "SELECT encoded_query, vars FROM pagination_tokens WHERE session_id = ?",
            (key,),
        ).fetchone()
        if row is None:
            return None
        return PaginationToken(query=row[0], vars=json.loads(row[1]))

    def set(self, key: str, token: PaginationToken | None) -> None:
        if token is None:
            self.conn.execute("DELETE FROM pagination_tokens WHERE session_id = ?", (key,))
            self.conn.commit()
            log.debug("Cleared continuation token: session=%s", key)
            return

        self.conn.execute(
            """
            INSERT INTO pagination_tokens (session_id, encoded_query, vars)
            VALUES (?, ?, ?)
            ON CONFLICT(session_id) DO UPDATE SET
                encoded_query = excluded.encoded_query,
                vars = excluded.vars,
                updated_at = CAST(strftime('%s','now') AS INTEGER)
            """,
            (key, token.query, json.dumps(token.vars, ensure_ascii=False)),
        )
        self.conn.commit()
        log.debug("Stored continuation token: session=%s", key)
