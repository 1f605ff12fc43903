# common/config/structlog_config.py
"""
Structlog setup.

``configure_structlog()`` runs once per process (uvicorn's reloader forks a
fresh one). Standard-library records from uvicorn and SQLAlchemy go through
the same renderer, so console and JSON output stay uniform.
"""
import logging
import os
import sys
import threading
from dataclasses import dataclass
from typing import Any, Optional

import structlog
from rich.traceback import install as install_rich_traceback

install_rich_traceback(show_locals=False, width=None, extra_lines=3)

_FRAMEWORK_NOISE = ["starlette", "uvicorn", "fastapi", "sqlalchemy"]


@dataclass
class _Setup:
    log_level: int
    json_logs: bool
    pid: int


_lock = threading.Lock()
_setup: Optional[_Setup] = None


def _current() -> Optional[_Setup]:
    if _setup is not None and _setup.pid == os.getpid():
        return _setup
    return None


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _renderer(json_logs: bool) -> Any:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(
            show_locals=False,
            width=None,
            suppress=_FRAMEWORK_NOISE,
        ),
    )


def _route_stdlib_logging(log_level: int, json_logs: bool) -> None:
    """Send stdlib records (uvicorn, sqlalchemy, alembic) through structlog."""
    extra: list[Any] = [structlog.stdlib.add_logger_name]
    if json_logs:
        extra.append(structlog.processors.format_exc_info)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors() + extra,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_logs),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)
    # uvicorn installs its own handlers; let records reach the root instead
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True


def configure_structlog(log_level: int, json_logs: bool = False) -> None:
    """
    Configure structlog for this process.

    Args:
        log_level: Numeric level (``logging.INFO`` etc.)
        json_logs: One JSON object per line instead of coloured console output

    Raises:
        RuntimeError: If this process is already configured with another level
    """
    global _setup

    with _lock:
        existing = _current()
        if existing is not None:
            if existing.log_level == log_level:
                return
            raise RuntimeError(
                f"structlog already configured in this process. "
                f"Current level: {existing.log_level}, attempted: {log_level}"
            )

        processors = _shared_processors()
        processors.append(
            structlog.processors.format_exc_info
            if json_logs
            else structlog.dev.set_exc_info
        )
        processors.append(_renderer(json_logs))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )
        _route_stdlib_logging(log_level, json_logs)

        _setup = _Setup(log_level=log_level, json_logs=json_logs, pid=os.getpid())


def get_logger(name: str = "app") -> structlog.BoundLogger:
    """
    Raises:
        RuntimeError: If configure_structlog() has not run in this process
    """
    if _current() is None:
        raise RuntimeError(
            "structlog not configured. "
            "Call configure_structlog() at application startup."
        )
    return structlog.get_logger(name)


def is_configured() -> bool:
    return _current() is not None


def get_log_level_name() -> Optional[str]:
    """Configured level as a name (``"INFO"``), or None before setup."""
    setup = _current()
    return logging.getLevelName(setup.log_level) if setup else None


def reset_structlog() -> None:
    """Forget the current configuration. FOR TESTING ONLY."""
    global _setup

    with _lock:
        structlog.reset_defaults()
        _setup = None


__all__ = [
    "configure_structlog",
    "get_logger",
    "is_configured",
    "get_log_level_name",
    "reset_structlog",
]
