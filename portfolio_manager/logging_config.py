"""
Logging setup for the portfolio manager.

Two output shapes share one handler: JSON lines in production, a short
text line in development. Audit sinks write to their own logger
(`Settings.audit_logger_name`) so its level can be tuned apart from the
rest of the package.

`configure_logging` is called once at process startup by
`portfolio_manager.database.startup`. Library code only ever does:

    from portfolio_manager.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Category reordered", extra={"entity_id": 12, "user_id": "u1"})
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Tuple

# Correlation ID for every line logged while one unit of work runs
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "request_id",
}

_QUIET_LOGGERS: Tuple[str, ...] = ("sqlalchemy.engine", "aiosqlite", "asyncio")

_DEV_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(request_id)s] %(message)s"


def get_request_id() -> Optional[str]:
    return request_id_var.get()


@contextmanager
def bind_request_id(request_id: str) -> Iterator[str]:
    """Tag every log line emitted inside the block with request_id."""
    token = request_id_var.set(request_id)
    try:
        yield request_id
    finally:
        request_id_var.reset(token)


class RequestIdFilter(logging.Filter):
    """Copies the bound request ID onto each record ("-" when unbound)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"  # type: ignore[attr-defined]
        return True


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields that arrived through extra=, made JSON-safe."""
    fields: Dict[str, Any] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_ATTRS or value is None:
            continue
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            value = str(value)
        fields[key] = value
    return fields


class JsonFormatter(logging.Formatter):
    """One JSON object per line: fixed envelope first, then extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None)
        if request_id and request_id != "-":
            entry["request_id"] = request_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(_extra_fields(record))
        return json.dumps(entry)


def _resolve_level(log_level: str, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    return logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO)


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
    audit_logger_name: Optional[str] = None,
    audit_level: Optional[str] = None,
) -> logging.Handler:
    """
    Install the package handler on the root logger.

    Calling it again replaces the handler installed by the previous call;
    handlers added by anyone else are left alone.

    Args:
        log_level: Root level name (DEBUG, INFO, WARNING, ERROR)
        environment: 'production' selects JSON lines, anything else text
        debug: Force DEBUG regardless of log_level
        audit_logger_name: Logger the audit sink writes to
        audit_level: Level for the audit logger; defaults to the root level

    Returns:
        The installed handler
    """
    level = _resolve_level(log_level, debug)

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        if getattr(existing, "portfolio_manager_handler", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.portfolio_manager_handler = True  # type: ignore[attr-defined]
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    if environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_DEV_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)

    if audit_logger_name:
        audit_logger = logging.getLogger(audit_logger_name)
        audit_logger.setLevel(_resolve_level(audit_level, False) if audit_level else level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module. Records pick up the bound request ID on output;
    pass structured fields with extra=.
    """
    return logging.getLogger(name)
