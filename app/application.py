# app/application.py
from typing import Any, AsyncContextManager, Callable, Optional

from fastapi import FastAPI

from app.api.error_translator import (
    register_error_handlers,
    unexpected_error_response,
)
from app.api.health_router import health_router
from app.api.v1 import patient_router
from common.config import AppConfig
from common.logger.logger_middleware import RequestLoggingMiddleware

Lifespan = Callable[[FastAPI], AsyncContextManager[Any]]


def create_app(config: AppConfig, lifespan: Optional[Lifespan] = None) -> FastAPI:
    """
    Assemble the HTTP application.

    The caller owns the database lifecycle: ``lifespan`` is expected to put a
    ``DbManager`` on ``app.state.db_manager`` before requests arrive.
    """
    app = FastAPI(
        title=config.app_title,
        version=config.app_version,
        description=f"Running in {config.environment.value} environment",
        lifespan=lifespan,
    )
    app.add_middleware(
        RequestLoggingMiddleware,
        expose_performance_headers=not config.environment.is_production,
        slow_request_threshold=config.slow_request_threshold,
        error_response=unexpected_error_response,
    )
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(patient_router)
    return app


__all__ = ["create_app"]
