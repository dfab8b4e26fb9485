"""Storage layer for MindbreezeClient.

Provides continuation token stores used to request page 2+ of a search.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from MindbreezeClient.storage.db import DatabaseManager
from MindbreezeClient.storage.tokens import InMemoryTokenStore, PaginationTokenStore, SqliteTokenStore
from MindbreezeClient.utils.log import log

if TYPE_CHECKING:
    from MindbreezeClient.config import AppConfig


def create_token_store(
    config: AppConfig,
) -> tuple[DatabaseManager | None, PaginationTokenStore]:
    """Create the configured continuation token store.

    Args:
        config: Application configuration containing pagination settings.

    Returns:
        Tuple of (db_manager, token_store). ``db_manager`` is None for the
        in-memory backend.
    """
    if config.pagination.backend == "sqlite":
        db_path = Path(config.pagination.db_path)
        db_manager = DatabaseManager(db_path)
        log.info("Pagination token storage: %s", db_path)
        return db_manager, SqliteTokenStore(db_manager)

    return None, InMemoryTokenStore()


__all__ = [
    "DatabaseManager",
    "PaginationTokenStore",
    "InMemoryTokenStore",
    "SqliteTokenStore",
    "create_token_store",
]
