# common/logger/logger.py
"""
Module-level loggers for the service.

    from common.logger import get_app_logger

    logger = get_app_logger(__name__)
    logger.info("Patient saved", patient_id=patient_id)

Loggers can be created at import time; the structlog logger behind them is
looked up on first use, after ``configure_structlog()`` has run.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import structlog

from common.config.structlog_config import get_logger as _get_structlog_logger


@dataclass
class TimingStats:
    """How long the logging calls themselves take."""

    total_calls: int = 0
    total_time: float = 0.0
    max_time: float = 0.0

    def record(self, elapsed: float) -> None:
        self.total_calls += 1
        self.total_time += elapsed
        if elapsed > self.max_time:
            self.max_time = elapsed

    def as_dict(self) -> Dict[str, Any]:
        avg = self.total_time / self.total_calls if self.total_calls else 0.0
        return {
            "total_calls": self.total_calls,
            "avg_time_ms": round(avg * 1000, 4),
            "max_time_ms": round(self.max_time * 1000, 4),
        }


class AppLogger:
    def __init__(
        self,
        name: str = "app",
        track_timing: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.name = name
        self._context = dict(context or {})
        self._bound: Optional[structlog.BoundLogger] = None
        self._timing = TimingStats() if track_timing else None

    def _target(self) -> structlog.BoundLogger:
        if self._bound is None:
            bound = _get_structlog_logger(self.name)
            self._bound = bound.bind(**self._context) if self._context else bound
        return self._bound

    def bind(self, **context: Any) -> "AppLogger":
        """A logger that adds ``context`` to every event; timing is not shared."""
        return AppLogger(self.name, context={**self._context, **context})

    def _emit(self, method: str, msg: str, kwargs: Dict[str, Any]) -> None:
        if self._timing is None:
            getattr(self._target(), method)(msg, **kwargs)
            return

        started = time.perf_counter()
        try:
            getattr(self._target(), method)(msg, **kwargs)
        finally:
            self._timing.record(time.perf_counter() - started)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._emit("debug", msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._emit("info", msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._emit("warning", msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._emit("error", msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Error level with the exception being handled attached."""
        kwargs.setdefault("exc_info", True)
        self._emit("error", msg, kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        self._emit("critical", msg, kwargs)

    def get_timing_stats(self) -> Dict[str, Any]:
        if self._timing is None:
            return {"error": "Timing tracking not enabled"}
        return self._timing.as_dict()


def get_app_logger(name: str = "app", track_timing: bool = False) -> AppLogger:
    return AppLogger(name=name, track_timing=track_timing)


__all__ = ["AppLogger", "TimingStats", "get_app_logger"]
