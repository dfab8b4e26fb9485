from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from MindbreezeClient.config.http import HttpConfig, check_http, load_http
from MindbreezeClient.config.pagination import PaginationConfig, check_pagination, load_pagination
from MindbreezeClient.config.runtime import RuntimeConfig, check_runtime, load_runtime
from MindbreezeClient.config.search import SearchConfig, check_search, load_search

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    search: SearchConfig
    http: HttpConfig
    pagination: PaginationConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse a merged mapping into a validated AppConfig."""
    runtime = load_runtime(raw)
    search = load_search(raw)
    http = load_http(raw)
    pagination = load_pagination(raw)

    check_runtime(runtime)
    check_search(search)
    check_http(http)
    check_pagination(pagination)

    return AppConfig(runtime=runtime, search=search, http=http, pagination=pagination)


def load_config(path: Path) -> AppConfig:
    """Load YAML config file without default merge."""
    return load_config_with_defaults(path, default_path=path)


def load_config_with_defaults(config_path: Path, default_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load config by merging an override file over the defaults file.

    A missing defaults file is treated as empty.
    """
    if config_path == default_path or not default_path.exists():
        return parse_config_dict(parse_yaml(config_path.read_text(encoding="utf-8")))
    base = parse_yaml(default_path.read_text(encoding="utf-8"))
    if config_path.resolve() == default_path.resolve():
        return parse_config_dict(base)
    override = parse_yaml(config_path.read_text(encoding="utf-8"))
    return parse_config_dict(merge_config_dicts(base, override))


def parse_yaml(text: str) -> dict[str, Any]:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings; override wins for non-mapping values."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
