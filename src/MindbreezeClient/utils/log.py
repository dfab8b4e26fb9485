"""MindbreezeClient logging utilities.

One package logger with a timestamp + four-letter level prefix. Library code
only emits records; ``configure_logging`` is called by the CLI.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Final

_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}

LOG_FORMAT: Final[str] = "%(asctime)s [%(levelabbr)s] %(message)s"
LOG_DATEFMT: Final[str] = "%m-%d %H:%M:%S"


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("MindbreezeClient")
log.addHandler(logging.NullHandler())


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> Path | None:
    """Configure the MindbreezeClient logger.

    Console records go to stderr so rendered results on stdout stay clean.
    When ``log_to_file`` is set, a DEBUG-level copy is written to
    ``<log_dir>/<action>/<action>_<mmddHHMMSS>.log``.

    Args:
        level: Console logging level (e.g. INFO, DEBUG).
        action: CLI action name used to build the log file path.
        log_to_file: Whether to mirror logs to a file.
        log_dir: Base directory for log files.

    Returns:
        Path of the log file, or None when not logging to a file.
    """
    console_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    formatter = _AbbrevLevelFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    log.handlers.clear()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(console_level)
    stream_handler.setFormatter(formatter)
    log.addHandler(stream_handler)

    log_path: Path | None = None
    if log_to_file and action:
        action_dir = Path(log_dir or "log") / action
        action_dir.mkdir(parents=True, exist_ok=True)
        log_path = action_dir / f"{action}_{datetime.now().strftime('%m%d%H%M%S')}.log"
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)

    log.setLevel(logging.DEBUG if log_path else console_level)
    log.propagate = False
    return log_path
