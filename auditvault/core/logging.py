"""Logging for auditvault.

Usage:
    from auditvault.core.logging import logger

    logger.info("plain message")
    cycle_logger = logger.with_context(organization="acme", window="10:00..11:00")
    cycle_logger.info("fetched 42 records")  # -> ... [organization=acme window=10:00..11:00]
"""

import logging
import os
import sys
from typing import Any, MutableMapping, Optional, Tuple

LOGGER_NAME = "auditvault"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s%(dimensions)s"


class _DimensionsFilter(logging.Filter):
    """Guarantee every record carries a ``dimensions`` attribute for the formatter."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "dimensions"):
            record.dimensions = ""
        return True


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that renders bound context dimensions on every record."""

    def __init__(self, logger: logging.Logger, dimensions: Optional[dict] = None):
        """Initialize with an underlying logger and optional dimensions."""
        super().__init__(logger, dict(dimensions or {}))

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with additional dimensions bound."""
        merged = {**self.extra, **{k: v for k, v in dimensions.items() if v is not None}}
        return ContextualLogger(self.logger, merged)

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        """Attach dimensions as a formatted suffix without clobbering caller extras."""
        extra = dict(kwargs.get("extra") or {})
        if self.extra:
            rendered = " ".join(f"{k}={v}" for k, v in self.extra.items())
            extra.setdefault("dimensions", f" [{rendered}]")
        kwargs["extra"] = extra
        return msg, kwargs


def configure_logging(level: Optional[str] = None) -> None:
    """Install a stdout handler on the package logger.

    Safe to call more than once; the handler is only added the first time.
    """
    base = logging.getLogger(LOGGER_NAME)
    base.setLevel((level or os.getenv("LOG_LEVEL") or "INFO").upper())
    if not any(getattr(h, "_auditvault", False) for h in base.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(_DimensionsFilter())
        handler._auditvault = True  # type: ignore[attr-defined]
        base.addHandler(handler)
    base.propagate = False


logger = ContextualLogger(logging.getLogger(LOGGER_NAME))
