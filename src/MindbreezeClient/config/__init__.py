from __future__ import annotations

"""Public configuration API for MindbreezeClient."""

from MindbreezeClient.config.app import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from MindbreezeClient.config.http import HttpConfig
from MindbreezeClient.config.pagination import PaginationConfig
from MindbreezeClient.config.runtime import RuntimeConfig
from MindbreezeClient.config.search import SearchConfig

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "RuntimeConfig",
    "SearchConfig",
    "HttpConfig",
    "PaginationConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
