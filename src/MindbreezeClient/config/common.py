from __future__ import annotations

"""Shared helpers for configuration loading and validation.

Type errors raise ``TypeError`` and missing keys raise ``ValueError``; every
message names the full dotted config key.
"""

from typing import Any, Mapping


def get_section(raw: Mapping[str, Any], key: str, *, required: bool, config_key: str | None = None) -> Mapping[str, Any]:
    """Return a mapping section, or an empty mapping for optional missing sections.

    Raises:
        ValueError: If section is required but missing.
        TypeError: If section is not a mapping.
    """
    name = config_key or key
    section = raw.get(key)
    if section is None:
        if required:
            raise ValueError(f"Missing required config: {name}")
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"{name} must be an object")
    return section


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    if field not in section:
        raise ValueError(f"Missing required config: {config_key}")
    return section[field]


def get_optional_value(section: Mapping[str, Any], field: str, default: Any) -> Any:
    return section.get(field, default)


def expect_str(value: Any, config_key: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{config_key} must be a string")
    return value


def expect_bool(value: Any, config_key: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{config_key} must be a boolean")
    return value


def expect_int(value: Any, config_key: str) -> int:
    """Validate an integer value (bool is rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{config_key} must be an integer")
    return value


def expect_float(value: Any, config_key: str) -> float:
    """Validate a numeric value and return it as float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{config_key} must be a number")
    return float(value)


def expect_str_list(value: Any, config_key: str) -> list[str]:
    if not isinstance(value, list):
        raise TypeError(f"{config_key} must be a list")
    return [expect_str(item, f"{config_key}[{idx}]") for idx, item in enumerate(value)]


def expect_str_list_mapping(value: Any, config_key: str) -> dict[str, list[str]]:
    """Validate a mapping of name to list of strings.

    A bare string value is accepted as a one-element list.
    """
    if not isinstance(value, Mapping):
        raise TypeError(f"{config_key} must be an object")
    out: dict[str, list[str]] = {}
    for name, items in value.items():
        if not isinstance(name, str):
            raise TypeError(f"{config_key} keys must be strings")
        item_key = f"{config_key}.{name}"
        out[name] = [items] if isinstance(items, str) else expect_str_list(items, item_key)
    return out
