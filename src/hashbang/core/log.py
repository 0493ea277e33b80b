"""Debug logging for hashbang.

Logging is opt-in and best-effort: it writes JSON lines to a file and never
changes how a script is dispatched.
"""

from __future__ import annotations

import logging
from pathlib import Path

import structlog

_logger: structlog.BoundLogger | None = None
_handler: logging.FileHandler | None = None


def configure_logging(log_path: Path | None) -> None:
    """Configure structlog to append JSON lines to log_path.

    Passing None disables logging. Any previously opened log file is closed.
    Setup failures leave logging disabled.
    """
    global _logger, _handler
    _logger = None
    if _handler is not None:
        _handler.close()
        _handler = None
    if log_path is None:
        return

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _handler = logging.FileHandler(log_path, encoding="utf-8")
        _handler.setLevel(logging.DEBUG)
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso", key="ts"),
                structlog.processors.add_log_level,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
            logger_factory=structlog.PrintLoggerFactory(file=_handler.stream),
            cache_logger_on_first_use=False,
        )
        _logger = structlog.get_logger().bind(log_path=str(log_path))
    except Exception:
        _logger = None  # Logging is optional - don't fail the dispatch


def log(event: str, level: str = "debug", **kwargs) -> None:
    """Log an event, silently ignoring errors. No-op if logging not configured."""
    if _logger is None:
        return
    try:
        getattr(_logger, level)(event, **kwargs)
    except Exception:
        pass
