"""Logging setup for the ``wireshape`` logger hierarchy."""

import logging
import sys
from typing import Optional

try:
    from json_log_formatter import JSONFormatter
except ImportError:
    JSONFormatter = None  # type: ignore

LOGGER_NAME = "wireshape"

# Record attributes rendered before the free-form context, in this order
_RECORD_FIELDS = ("transformer", "mode")


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    transformer_name: Optional[str] = None,
) -> None:
    """Send wireshape logs to stdout, replacing any handler set up earlier.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL); unknown
            names fall back to INFO
        json_format: Emit one JSON document per record instead of text
        transformer_name: Default ``transformer`` for records without one

    Raises:
        ImportError: If JSON output is requested without json-log-formatter
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(_make_formatter(json_format))
    if transformer_name:
        handler.addFilter(_TransformerNameFilter(transformer_name))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(handler)


def _make_formatter(json_format: bool) -> logging.Formatter:
    if not json_format:
        return StructuredFormatter()
    if JSONFormatter is None:
        raise ImportError(
            "json-log-formatter is required for JSON logging. "
            "Install it with: pip install wireshape[json-logs]"
        )
    return JSONFormatter()


class _TransformerNameFilter(logging.Filter):
    """Stamps a default transformer name on records that lack one."""

    def __init__(self, transformer_name: str):
        super().__init__()
        self._transformer_name = transformer_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "transformer"):
            record.transformer = self._transformer_name
        return True


class StructuredFormatter(logging.Formatter):
    """Renders ``[LEVEL] transformer=... mode=... key=value message``."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [f"[{record.levelname}]"]
        parts.extend(
            f"{name}={getattr(record, name)}"
            for name in _RECORD_FIELDS
            if hasattr(record, name)
        )
        parts.extend(f"{key}={value}" for key, value in getattr(record, "context", {}).items())
        parts.append(record.getMessage())
        return " ".join(parts)
