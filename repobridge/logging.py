"""Logging utilities for repobridge commands and the service."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

_LOGGER_NAME = "repobridge"


class JsonLineFormatter(logging.Formatter):
    """Render each record as a single JSON object for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            # first five lines of the traceback are enough to locate a failure
            entry["stack"] = "\n".join(self.formatException(record.exc_info).splitlines()[:5])
        return json.dumps(entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the repobridge hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    level: str | None = None,
    json_lines: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the repobridge logger with console output and optional file sink."""
    resolved = logging.DEBUG if verbose else _parse_level(level)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(resolved)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved)
    if json_lines:
        stream_handler.setFormatter(JsonLineFormatter())
    else:
        stream_handler.setFormatter(logging.Formatter("[repobridge] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(resolved)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def _parse_level(level: str | None) -> int:
    if not level:
        return logging.INFO
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


__all__ = ["JsonLineFormatter", "configure_logging", "get_logger"]
