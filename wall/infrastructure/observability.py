"""Structured Logging — JSON formatter, setup, and fatal-fault handling.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (error_code, path, message_id, payer, backend) surfaced when present
    - X-PAYMENT header contents are never logged, only their presence
    - An exception nobody handled terminates the process (exit code 1) after logging

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup via lifespan
"""

import logging
import json
import os
import sys
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_EXTRA_KEYS = (
    "error_code", "path", "method", "has_payment",
    "message_id", "payer", "backend", "purged",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


def _terminate() -> None:
    logging.shutdown()
    os._exit(1)


def loop_exception_handler(loop, context: dict) -> None:
    """asyncio handler: a task died with nobody awaiting it — state is suspect."""
    exc = context.get("exception")
    if exc is None or isinstance(exc, ConnectionError):
        # Dropped client sockets and plain warnings are not state corruption
        logger.warning(f"Event loop: {context.get('message')}")
        return
    logger.critical(
        f"Unhandled event loop fault: {context.get('message')}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    _terminate()


def excepthook(exc_type, exc, tb) -> None:
    logger.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
    _terminate()


def install_fatal_handlers(loop) -> None:
    """Make uncaught faults fatal for both the event loop and the main thread."""
    loop.set_exception_handler(loop_exception_handler)
    sys.excepthook = excepthook
