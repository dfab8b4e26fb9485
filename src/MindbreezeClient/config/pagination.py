from __future__ import annotations

"""Pagination domain configuration for continuation token storage."""

from dataclasses import dataclass
from typing import Any, Mapping

from MindbreezeClient.config.common import (
    expect_bool,
    expect_str,
    get_optional_value,
    get_section,
)

_ALLOWED_BACKENDS = {"memory", "sqlite"}


@dataclass(frozen=True, slots=True)
class PaginationConfig:
    """Continuation token storage settings."""

    backend: str
    db_path: str
    session_id: str
    clear_token_on_http_error: bool


def load_pagination(raw: Mapping[str, Any]) -> PaginationConfig:
    section = get_section(raw, "pagination", required=False)
    return PaginationConfig(
        backend=expect_str(get_optional_value(section, "backend", "memory"), "pagination.backend").lower(),
        db_path=expect_str(get_optional_value(section, "db_path", "database/pagination.db"), "pagination.db_path"),
        session_id=expect_str(get_optional_value(section, "session_id", "default"), "pagination.session_id"),
        clear_token_on_http_error=expect_bool(
            get_optional_value(section, "clear_token_on_http_error", False),
            "pagination.clear_token_on_http_error",
        ),
    )


def check_pagination(config: PaginationConfig) -> None:
    """Validate pagination domain constraints."""
    if config.backend not in _ALLOWED_BACKENDS:
        raise ValueError(f"pagination.backend must be one of {sorted(_ALLOWED_BACKENDS)}")
    if config.backend == "sqlite" and not config.db_path.strip():
        raise ValueError("pagination.db_path must not be empty when pagination.backend is sqlite")
    if not config.session_id.strip():
        raise ValueError("pagination.session_id must not be empty")
