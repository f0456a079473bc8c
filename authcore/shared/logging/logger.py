"""Structured logging utilities."""

from __future__ import annotations

import logging
import os
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")


def _log_file_path() -> str | None:
    return os.getenv("LOG_FILE") or None


class _InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)
        _logger.opt(depth=6, exception=record.exc_info).log(
            level,
            record.getMessage(),
            correlation_id=_CORRELATION_ID.get(),
        )


class ContextualLogger:
    """Proxy for loguru that injects correlation ids via ContextVar."""

    def __getattr__(self, name):  # pragma: no cover
        bound = _logger.bind(correlation_id=_CORRELATION_ID.get())
        return getattr(bound, name)


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


@contextmanager
def correlation_scope(value: str | None = None) -> Iterator[str]:
    """Tag every log line emitted inside the block with one correlation id.

    Nested scopes without an explicit value reuse the enclosing id.
    """
    current = _CORRELATION_ID.get()
    if value is None and current != "-":
        yield current
        return
    token = _CORRELATION_ID.set(value or uuid.uuid4().hex[:12])
    try:
        yield _CORRELATION_ID.get()
    finally:
        _CORRELATION_ID.reset(token)


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_file = log_file or _log_file_path()

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
    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        _logger.add(
            log_file,
            level=level,
            format=_FMT,
            filter=sanitize_record,
            colorize=False,
            backtrace=False,
            diagnose=False,
            enqueue=True,
            encoding="utf-8",
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


logger = ContextualLogger()

__all__ = [
    "logger",
    "setup_logging",
    "correlation_scope",
    "get_correlation_id",
]
