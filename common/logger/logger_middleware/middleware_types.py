# common/logger/logger_middleware/middleware_types.py
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, computed_field


class LogSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class RequestLogEntry(BaseModel):
    """
    One line per handled request.

    Optional fields are left as None when the middleware is told not to
    collect them and are dropped from the dump with ``exclude_none``.
    """

    model_config = {"frozen": True}

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: str
    method: str
    path: str
    status_code: int = Field(..., ge=100, le=599)
    duration_ms: float = Field(..., ge=0)

    client_host: Optional[str] = None
    user_agent: Optional[str] = None
    query_params: Optional[Dict[str, Any]] = None
    path_params: Optional[Dict[str, Any]] = None
    content_length: Optional[int] = Field(None, ge=0)

    slow_threshold_ms: float = Field(1000.0, gt=0, exclude=True)

    @computed_field
    def is_slow(self) -> bool:
        return self.duration_ms > self.slow_threshold_ms

    @computed_field
    def is_error(self) -> bool:
        return self.status_code >= 500

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def severity(self) -> LogSeverity:
        """5xx is an error; slow or 4xx is a warning; the rest is info."""
        if self.is_error:  # type: ignore[truthy-function]
            return LogSeverity.ERROR
        if self.is_slow or self.is_client_error:  # type: ignore[truthy-function]
            return LogSeverity.WARNING
        return LogSeverity.INFO

    @property
    def summary(self) -> str:
        if self.is_error:  # type: ignore[truthy-function]
            return "Request failed with server error"
        if self.is_slow:  # type: ignore[truthy-function]
            return f"Slow request detected ({self.duration_ms}ms)"
        if self.is_client_error:
            return "Request failed with client error"
        return "Request completed"


__all__ = ["LogSeverity", "RequestLogEntry"]
