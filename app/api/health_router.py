# app/api/health_router.py
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from common.config import get_log_level_name, is_configured
from common.logger import get_app_logger

logger = get_app_logger(__name__)

health_router = APIRouter(tags=["Health"])


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="Current system health status")
    timestamp: datetime = Field(..., description="Server time in ISO 8601 format")
    version: str = Field(..., description="Application version")
    logging_configured: bool = Field(..., description="Logging configuration status")
    log_level: Optional[str] = Field(None, description="Active log level")
    database: Optional[dict[str, Any]] = Field(
        None, description="Database round-trip result, when a database is attached"
    )


@health_router.get(
    "/health",
    response_model=HealthCheckResponse,
    responses={
        200: {"description": "System is healthy"},
        503: {"description": "Database unreachable"},
    },
)
async def check_health(request: Request) -> JSONResponse:
    db_manager = getattr(request.app.state, "db_manager", None)
    database = await db_manager.health_check() if db_manager is not None else None
    healthy = database is None or database.get("healthy", False)

    body = HealthCheckResponse(
        status="Healthy" if healthy else "Unhealthy",
        timestamp=datetime.now(timezone.utc),
        version=request.app.version,
        logging_configured=is_configured(),
        log_level=get_log_level_name(),
        database=database,
    )
    if not healthy:
        logger.error("Health check failed", endpoint="/health", database=database)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(mode="json"),
        )

    logger.debug("Health check passed", version=body.version, endpoint="/health")
    return JSONResponse(content=body.model_dump(mode="json"))


__all__ = ["health_router", "HealthCheckResponse"]
