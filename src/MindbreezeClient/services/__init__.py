"""Search service layer for MindbreezeClient."""

from __future__ import annotations

from typing import TYPE_CHECKING

from MindbreezeClient.services.search import ConstraintSpec, SearchParams, SearchService
from MindbreezeClient.transport.client import MindbreezeHttpClient

if TYPE_CHECKING:
    from MindbreezeClient.config import AppConfig
    from MindbreezeClient.storage.tokens import PaginationTokenStore


def create_search_service(config: AppConfig, token_store: PaginationTokenStore) -> SearchService:
    """Create a search service backed by ``MindbreezeHttpClient``.

    Args:
        config: Application configuration.
        token_store: Continuation token store shared across searches.

    Returns:
        Configured SearchService instance.
    """
    http = MindbreezeHttpClient(
        timeout=config.http.timeout,
        max_attempts=config.http.max_attempts,
        user_agent=config.http.user_agent,
    )
    return SearchService(
        config=config.search,
        http=http,
        token_store=token_store,
        session_id=config.pagination.session_id,
        clear_token_on_http_error=config.pagination.clear_token_on_http_error,
    )


__all__ = [
    "ConstraintSpec",
    "SearchParams",
    "SearchService",
    "create_search_service",
]
