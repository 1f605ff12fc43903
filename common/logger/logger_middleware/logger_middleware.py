# common/logger/logger_middleware/logger_middleware.py
"""
Per-request logging and correlation.

Each request is tagged with an id, taken from the incoming ``X-Request-ID``
header or freshly generated. The id is bound into structlog's context vars
while the request runs, so every log line the handlers emit carries it, and
it is echoed back on the response.

    app.add_middleware(
        RequestLoggingMiddleware,
        slow_request_threshold=500,
        log_query_params=False,
    )
"""

import time
import uuid
from typing import Awaitable, Callable, Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..logger import get_app_logger
from .middleware_types import RequestLogEntry

REQUEST_ID_HEADER = "X-Request-ID"
SERVER_TIMING_HEADER = "Server-Timing"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        *,
        expose_performance_headers: bool = False,
        log_details: bool = True,
        slow_request_threshold: float = 1000.0,
        log_query_params: bool = True,
        log_client_info: bool = True,
        logger_name: Optional[str] = None,
        error_response: Optional[Callable[[Exception], Response]] = None,
    ):
        """
        Args:
            error_response: Builds the response for an exception the app did
                not handle, so it still gets the request id and a log line.
                Without it the exception propagates.
            expose_performance_headers: Add ``Server-Timing: total;dur=<ms>``
            log_details: Include client, params and size in the log line
            slow_request_threshold: Milliseconds above which a request is
                logged as a warning
            log_query_params: Include the query string (may contain PII)
            log_client_info: Include client address and User-Agent
        """
        super().__init__(app)
        self.expose_performance_headers = expose_performance_headers
        self.log_details = log_details
        self.slow_request_threshold = slow_request_threshold
        self.log_query_params = log_query_params
        self.log_client_info = log_client_info
        self.logger = get_app_logger(name=logger_name or __name__)
        self.error_response = error_response

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as e:
                if self.error_response is None:
                    raise
                self.logger.exception(
                    "An unexpected error occurred",
                    path=request.url.path,
                    method=request.method,
                    error=str(e),
                )
                response = self.error_response(e)
            duration_ms = (time.perf_counter() - started) * 1000

            response.headers[REQUEST_ID_HEADER] = request_id
            if self.expose_performance_headers:
                response.headers[SERVER_TIMING_HEADER] = f"total;dur={duration_ms:.2f}"

            entry = self._entry(request, response, request_id, duration_ms)
            getattr(self.logger, entry.severity.value)(
                entry.summary, **entry.model_dump(mode="json", exclude_none=True)
            )

        return response

    def _entry(
        self,
        request: Request,
        response: Response,
        request_id: str,
        duration_ms: float,
    ) -> RequestLogEntry:
        fields = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "slow_threshold_ms": self.slow_request_threshold,
        }

        if self.log_details:
            if self.log_client_info:
                fields["client_host"] = request.client.host if request.client else None
                fields["user_agent"] = request.headers.get("user-agent")
            if self.log_query_params and request.query_params:
                fields["query_params"] = dict(request.query_params)
            if request.path_params:
                fields["path_params"] = dict(request.path_params)
            fields["content_length"] = (
                int(response.headers.get("content-length", 0)) or None
            )

        return RequestLogEntry(**fields)


__all__ = [
    "REQUEST_ID_HEADER",
    "SERVER_TIMING_HEADER",
    "RequestLoggingMiddleware",
]
