"""loguru setup with per-request context.

Every record carries the request correlation id and, once the bearer gate
has accepted a token, the authenticated user id.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<yellow>user={extra[user_id]}</yellow> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")
_USER_ID: ContextVar[str] = ContextVar("user_id", default="-")

_logger.configure(extra={"correlation_id": "-", "user_id": "-"})

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = {
    "werkzeug": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


def _default_log_file() -> Path:
    return Path(__file__).resolve().parents[2] / "instance" / "useraccounts.log"


class _InterceptHandler(logging.Handler):
    """Routes stdlib logging (werkzeug, sqlalchemy, httpx) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)
        _logger.opt(depth=6, exception=record.exc_info).bind(
            correlation_id=_CORRELATION_ID.get(),
            user_id=_USER_ID.get(),
        ).log(level, record.getMessage())


class ContextualLogger:
    """Proxy for loguru that binds the current request context on every call."""

    def __getattr__(self, name):  # pragma: no cover
        bound = _logger.bind(correlation_id=_CORRELATION_ID.get(), user_id=_USER_ID.get())
        return getattr(bound, name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def set_user_id(value: int | None) -> None:
    _USER_ID.set("-" if value is None else str(value))


def clear_correlation_id() -> None:
    """Reset the whole request context, user id included."""
    _CORRELATION_ID.set("-")
    _USER_ID.set("-")


def setup_logging(
    level: str | None = None,
    *,
    debug_mode: bool = False,
    log_file: str | os.PathLike[str] | None = None,
) -> None:
    level = "DEBUG" if debug_mode else (level or "INFO").upper()
    path = Path(log_file) if log_file else _default_log_file()
    path.parent.mkdir(parents=True, exist_ok=True)

    _logger.remove()
    _logger.add(
        sys.stderr,
        level=level,
        format=_FMT,
        filter=sanitize_record,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )
    _logger.add(
        str(path),
        level=level,
        format=_FMT,
        filter=sanitize_record,
        colorize=False,
        backtrace=False,
        diagnose=False,
        enqueue=True,
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, lvl in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(lvl)


logger = ContextualLogger()

__all__ = [
    "logger",
    "setup_logging",
    "set_correlation_id",
    "set_user_id",
    "clear_correlation_id",
    "get_correlation_id",
]
