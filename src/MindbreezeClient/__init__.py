"""MindbreezeClient: request builder and response normalizer for the Mindbreeze search API."""

from __future__ import annotations

from MindbreezeClient.core.constraints import (
    BetweenDatesConstraint,
    RegexConstraint,
    TermConstraint,
    create_constraint,
)
from MindbreezeClient.core.models import HttpResult, Pagination, PaginationToken, Record, SearchResponse
from MindbreezeClient.core.request import QueryBuilder, encode_query
from MindbreezeClient.core.response import ResponseNormalizer
from MindbreezeClient.errors import HttpError, InvalidArgumentError, MindbreezeError, PaginationStateError
from MindbreezeClient.storage.tokens import InMemoryTokenStore, PaginationTokenStore, SqliteTokenStore

__all__ = [
    "BetweenDatesConstraint",
    "RegexConstraint",
    "TermConstraint",
    "create_constraint",
    "HttpResult",
    "Pagination",
    "PaginationToken",
    "Record",
    "SearchResponse",
    "QueryBuilder",
    "encode_query",
    "ResponseNormalizer",
    "MindbreezeError",
    "InvalidArgumentError",
    "HttpError",
    "PaginationStateError",
    "InMemoryTokenStore",
    "PaginationTokenStore",
    "SqliteTokenStore",
]
