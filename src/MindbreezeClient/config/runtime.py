"""Runtime domain configuration (logging and output format)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from MindbreezeClient.config.common import (
    expect_bool,
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_ALLOWED_OUTPUT_FORMATS = {"text", "json"}


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Store validated process behavior settings."""

    log_level: str
    log_to_file: bool
    log_dir: str
    output_format: str


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    """Load the ``log`` and ``output`` sections.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    log_section = get_section(raw, "log", required=True)
    output_section = get_section(raw, "output", required=False)
    return RuntimeConfig(
        log_level=expect_str(get_required_value(log_section, "level", "log.level"), "log.level").upper(),
        log_to_file=expect_bool(get_required_value(log_section, "to_file", "log.to_file"), "log.to_file"),
        log_dir=expect_str(get_optional_value(log_section, "dir", "log"), "log.dir"),
        output_format=expect_str(get_optional_value(output_section, "format", "text"), "output.format").lower(),
    )


def check_runtime(config: RuntimeConfig) -> None:
    """Validate runtime domain constraints.

    Raises:
        ValueError: If values violate runtime constraints.
    """
    if config.log_level not in _ALLOWED_LOG_LEVELS:
        raise ValueError(f"log.level must be one of {sorted(_ALLOWED_LOG_LEVELS)}")
    if config.log_to_file and not config.log_dir.strip():
        raise ValueError("log.dir must not be empty when log.to_file is true")
    if config.output_format not in _ALLOWED_OUTPUT_FORMATS:
        raise ValueError(f"output.format must be one of {sorted(_ALLOWED_OUTPUT_FORMATS)}")
