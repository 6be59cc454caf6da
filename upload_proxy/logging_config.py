"""
Logging configuration for the upload proxy.

Log calls pass request context through ``extra={...}``; the formatter
appends those fields to the line as key=value pairs so they survive in
plain-text logs.
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Names accepted in LOG_LEVEL. trace/panic/fatal keep older deployment
# configs working.
LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
    "critical": logging.CRITICAL,
}

_RECORD_ATTRIBUTES = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "color_message",  # set by uvicorn
}


def parse_level(name: Optional[str]) -> int:
    """Map a level name to a logging level; unknown names mean DEBUG."""
    if not name:
        return logging.DEBUG
    return LEVELS.get(name.strip().lower(), logging.DEBUG)


class ContextFormatter(logging.Formatter):
    """Formatter that renders ``extra`` fields after the message."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        }
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in context.items())
        return line


def configure_logging(level_name: Optional[str]) -> int:
    """
    Install the root handler at the requested level.

    Returns:
        The numeric level in effect
    """
    level = parse_level(level_name)

    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter(LOG_FORMAT))

    logging.basicConfig(level=level, handlers=[handler], force=True)
    return level
