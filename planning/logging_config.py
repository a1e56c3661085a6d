"""
Logging setup shared by the API and the import tooling.

Every line is written to stdout as:
    2026-01-06T14:05:52Z [source] LEVEL message

LOG_LEVEL selects the verbosity:
    INFO (default)  imports started/committed, records created or updated
    DEBUG           per-chunk progress, payment lookups, prompts sent
    TRACE           PocketBase query parameters and batch sizes

Usage:
    from planning.logging_config import configure_logging, get_logger

    configure_logging(source="api")
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
import time

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LEVELS_BY_NAME: dict[str, int] = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

# Loggers that take over our stdout handler instead of installing their own
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# HTTP clients log every request; openai also logs full prompts at DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "openai")


def _trace(self: logging.Logger, message: object, *args: object, **kw: object) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kw)  # type: ignore[arg-type]


logging.Logger.trace = _trace  # type: ignore[attr-defined]


class ISO8601Formatter(logging.Formatter):
    """Formats records as `<UTC timestamp> [source] LEVEL message`."""

    converter = time.gmtime

    def __init__(self, source: str = "app"):
        super().__init__()
        self.source = source

    def format(self, record: logging.LogRecord) -> str:
        stamp = self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ")
        line = f"{stamp} [{self.source}] {record.levelname} {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class HealthCheckFilter(logging.Filter):
    """Drops access-log lines for the health endpoint above DEBUG."""

    HEALTH_PATHS = ("/health", "/api/health")

    @classmethod
    def is_health_check(cls, message: str) -> bool:
        return any(path in message for path in cls.HEALTH_PATHS) and ("GET" in message or "200" in message)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= logging.DEBUG or not self.is_health_check(record.getMessage())


def resolve_level(env_value: str | None = None, debug: bool | None = None) -> int:
    """Pick the level from LOG_LEVEL; debug=True raises INFO to DEBUG."""
    name = (env_value if env_value is not None else os.getenv("LOG_LEVEL", "")).strip().upper()
    level = LEVELS_BY_NAME.get(name, logging.INFO)
    if debug and level > logging.DEBUG:
        level = logging.DEBUG
    return level


def configure_logging(
    source: str = "app",
    level: int | None = None,
    debug: bool | None = None,
) -> logging.Logger:
    """Route all logging through one stdout handler.

    Args:
        source: Tag shown in brackets, e.g. "api" or "import"
        level: Explicit level; when None it comes from LOG_LEVEL
        debug: Force at least DEBUG

    Returns:
        The root logger
    """
    if level is None:
        level = resolve_level(debug=debug)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ISO8601Formatter(source=source))
    handler.addFilter(HealthCheckFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.setLevel(level)
        server_logger.propagate = False

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
