"""Opt-in logging for convergent.

The package logs under the ``convergent`` logger and ships a
NullHandler, so nothing is printed until one of these is called:

    import convergent

    convergent.enable_console_logging(level="DEBUG")
    convergent.configure_from_env()

What gets logged:

- ``convergent.replication``: INFO when a replica group converges,
  DEBUG for each replica-to-replica merge.
- ``convergent.crdt.or_set``: DEBUG per merge (entries seen and adopted).
- ``convergent.crdt.g_counter``: DEBUG when a merge is rejected for shape.
- ``convergent.crdt.lww_register``: DEBUG when two registers diverged.
- ``convergent.crdt.codec``: WARNING for snapshots of an unknown type.

Environment variables:
    CONVERGENT_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    CONVERGENT_LOG_JSON: Set to "1" for one JSON object per line
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from typing import IO, Literal

__all__ = [
    "JsonFormatter",
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
]

LOGGER_NAME = "convergent"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"

ENV_LEVEL = "CONVERGENT_LOGGING"
ENV_JSON = "CONVERGENT_LOG_JSON"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_installed: list[logging.Handler] = []


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for log shippers.

    Example output:
        {"timestamp": "2024-01-15T10:30:00.123456+00:00", "level": "INFO",
         "logger": "convergent.replication",
         "message": "3 GCounter replicas converged after 2 gossip rounds"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def enable_console_logging(
    level: LogLevel | int = "INFO",
    json_format: bool = False,
    stream: IO[str] | None = None,
) -> logging.StreamHandler:
    """Send convergent's log records to stderr (or ``stream``).

    Calling it again replaces the handler installed by the previous call
    instead of adding a second one.

    Args:
        level: Log level name or int. Unknown names fall back to INFO.
        json_format: Emit JSON lines through ``JsonFormatter``.
        stream: Where to write. Defaults to ``sys.stderr``.

    Returns:
        The installed StreamHandler.
    """
    disable_logging()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(DEFAULT_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level(level))
    logger.addHandler(handler)
    _installed.append(handler)
    return handler


def configure_from_env() -> logging.StreamHandler | None:
    """Enable console logging when ``CONVERGENT_LOGGING`` is set.

    Returns:
        The installed handler, or None if the variable is unset.
    """
    level = os.environ.get(ENV_LEVEL, "").strip()
    if not level:
        return None
    return enable_console_logging(level, json_format=os.environ.get(ENV_JSON) == "1")


def disable_logging() -> None:
    """Remove handlers installed here and return to the silent default."""
    logger = logging.getLogger(LOGGER_NAME)
    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
