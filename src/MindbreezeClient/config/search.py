"""Search domain configuration: endpoint, request defaults and datasources."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

from MindbreezeClient.config.common import (
    expect_int,
    expect_str,
    expect_str_list,
    expect_str_list_mapping,
    get_optional_value,
    get_section,
)
from MindbreezeClient.core.request import VALID_ORDER, VALID_ORDER_BY


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Store validated search endpoint and request defaults.

    Attributes:
        url: Resolved search endpoint.
        url_env: Environment variable overriding ``url`` when set.
        per_page: Results per page.
        page_count: Page navigation entries requested.
        alternatives: Max alternative queries requested.
        content_sample_length: Snippet length.
        properties: Result properties requested by default.
        facets: Facets requested by default.
        order_by: Default order field (``relevance`` or ``date``).
        order: Default order direction (``asc`` or ``desc``).
        datasources: Named datasource constraints.
    """

    url: str
    url_env: str
    per_page: int
    page_count: int
    alternatives: int
    content_sample_length: int
    properties: tuple[str, ...]
    facets: tuple[str, ...]
    order_by: str
    order: str
    datasources: Mapping[str, tuple[str, ...]] = field(default_factory=dict)


def load_search(raw: Mapping[str, Any]) -> SearchConfig:
    """Load search domain config from raw mapping.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "search", required=True)
    url_env = expect_str(get_optional_value(section, "url_env", ""), "search.url_env")
    url = expect_str(get_optional_value(section, "url", ""), "search.url")
    if url_env and os.getenv(url_env):
        url = os.environ[url_env]

    datasources = expect_str_list_mapping(get_optional_value(section, "datasources", {}) or {}, "search.datasources")
    return SearchConfig(
        url=url.strip(),
        url_env=url_env,
        per_page=expect_int(get_optional_value(section, "per_page", 10), "search.per_page"),
        page_count=expect_int(get_optional_value(section, "page_count", 10), "search.page_count"),
        alternatives=expect_int(get_optional_value(section, "alternatives", 10), "search.alternatives"),
        content_sample_length=expect_int(
            get_optional_value(section, "content_sample_length", 300),
            "search.content_sample_length",
        ),
        properties=tuple(expect_str_list(get_optional_value(section, "properties", []), "search.properties")),
        facets=tuple(expect_str_list(get_optional_value(section, "facets", []), "search.facets")),
        order_by=expect_str(get_optional_value(section, "order_by", "relevance"), "search.order_by").lower(),
        order=expect_str(get_optional_value(section, "order", "desc"), "search.order").lower(),
        datasources={name: tuple(ids) for name, ids in datasources.items()},
    )


def check_search(config: SearchConfig) -> None:
    """Validate search domain constraints.

    Raises:
        ValueError: If values violate search constraints.
    """
    if not config.url:
        hint = f" (or set {config.url_env})" if config.url_env else ""
        raise ValueError(f"search.url must not be empty{hint}")
    if not config.url.startswith(("http://", "https://")):
        raise ValueError("search.url must be an http(s) URL")
    if config.per_page <= 0:
        raise ValueError("search.per_page must be positive")
    if config.page_count < 0:
        raise ValueError("search.page_count must not be negative")
    if config.alternatives < 0:
        raise ValueError("search.alternatives must not be negative")
    if config.content_sample_length < 0:
        raise ValueError("search.content_sample_length must not be negative")
    if config.order_by not in VALID_ORDER_BY:
        raise ValueError(f"search.order_by must be one of {sorted(VALID_ORDER_BY)}")
    if config.order not in VALID_ORDER:
        raise ValueError(f"search.order must be one of {sorted(VALID_ORDER)}")
    for name, ids in config.datasources.items():
        if not ids:
            raise ValueError(f"search.datasources.{name} must include at least one datasource")
