"""Logging setup shared by the poller, the API and the CLI.

Every module logs through ``logging.getLogger(__name__)``; all of those loggers
sit under the ``deskwatch`` root configured here, which writes to one rotating
file and optionally to the console.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "deskwatch"

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "deskwatch.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Credentials that may appear in Zammad error bodies or echoed request headers
_REDACTIONS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"Token token=[^\s\"',]+"), "Token token=[REDACTED]"),
    (re.compile(r"Bearer [A-Za-z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"token=[A-Za-z0-9._-]+"), "token=[REDACTED]"),
]


def _resolve_level(level: str | None) -> tuple[str, int]:
    name = (level or os.environ.get("DESKWATCH_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    return name, logging.getLevelNamesMapping().get(name, logging.INFO)


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Configure the ``deskwatch`` logger.

    Calling this again replaces the previous handlers instead of stacking them.

    Args:
        log_dir: Directory for the log file. Falls back to ``DESKWATCH_LOG_DIR``,
            then ``logs``. Created if missing.
        log_file: File name inside ``log_dir``.
        max_bytes: Size at which the file is rotated.
        backup_count: Rotated files to keep.
        level: Level name. Falls back to ``DESKWATCH_LOG_LEVEL``, then INFO.
        console: Also log to stderr.

    Returns:
        The configured ``deskwatch`` logger.
    """
    directory = Path(log_dir or os.environ.get("DESKWATCH_LOG_DIR") or DEFAULT_LOG_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    level_name, level_value = _resolve_level(level)

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level_value)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            directory / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(level_value)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.info("deskwatch logging initialized (level=%s, file=%s)", level_name, directory / log_file)
    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for a component, e.g. ``get_logger("poller")`` → ``deskwatch.poller``."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def truncate_output(output: str, max_length: int = 2000) -> str:
    """Shorten a long response body before it goes into a log record."""
    overflow = len(output) - max_length
    if overflow <= 0:
        return output
    return f"{output[:max_length]}\n... [truncated, {overflow} more chars]"


def sanitize_for_log(text: str) -> str:
    """Replace API tokens in ``text`` with placeholders."""
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text
