"""
Logging setup for TuneSearch.

Console output only, either as plain text or one JSON object per line.
Search context (query, provider, page token) can be attached to every
record inside a ``LogContext`` block.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Optional

from tunesearch.config import get_settings


# Record attributes copied into JSON output when present
CONTEXT_FIELDS = ("query", "provider", "page_token")

_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "aiosqlite")


class JSONFormatter(logging.Formatter):
    """One-line JSON per record: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }
        return json.dumps(entry, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """Send logs to stdout at ``level`` (defaults to the configured level)."""
    config = get_settings().logging

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if config.json_format else logging.Formatter(config.format))

    logging.basicConfig(
        level=getattr(logging, (level or config.level).upper()),
        handlers=[handler],
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Attach extra attributes to every record created inside the block.

    Usage:
        with LogContext(query="jazz", provider="youtube"):
            logger.info("Searching")
    """

    def __init__(self, **context):
        self.context = context
        self._previous = None

    def __enter__(self):
        previous = logging.getLogRecordFactory()
        context = self.context

        def factory(*args, **kwargs):
            record = previous(*args, **kwargs)
            for key, value in context.items():
                setattr(record, key, value)
            return record

        self._previous = previous
        logging.setLogRecordFactory(factory)
        return self

    def __exit__(self, *exc):
        if self._previous is not None:
            logging.setLogRecordFactory(self._previous)
