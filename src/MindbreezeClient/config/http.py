"""HTTP transport configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from MindbreezeClient.config.common import (
    expect_float,
    expect_int,
    expect_str,
    get_optional_value,
    get_section,
)
from MindbreezeClient.transport.client import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT


@dataclass(frozen=True, slots=True)
class HttpConfig:
    """HTTP client settings."""

    timeout: float
    max_attempts: int
    user_agent: str


def load_http(raw: Mapping[str, Any]) -> HttpConfig:
    section = get_section(raw, "http", required=False)
    return HttpConfig(
        timeout=expect_float(get_optional_value(section, "timeout", DEFAULT_TIMEOUT), "http.timeout"),
        max_attempts=expect_int(get_optional_value(section, "max_attempts", 1), "http.max_attempts"),
        user_agent=expect_str(get_optional_value(section, "user_agent", DEFAULT_USER_AGENT), "http.user_agent"),
    )


def check_http(config: HttpConfig) -> None:
    if config.timeout <= 0:
        raise ValueError("http.timeout must be positive")
    if config.max_attempts < 1:
        raise ValueError("http.max_attempts must be at least 1")
    if not config.user_agent.strip():
        raise ValueError("http.user_agent must not be empty")
