# app/api/error_translator.py
"""
Single place where failures become HTTP responses.

Service failures arrive as ``Failure`` values; framework errors (bad JSON,
wrong-typed path parameters, unknown routes, unsupported methods) and
unexpected exceptions are converted to a ``Failure`` first, so every error
body has the same ``{data, message, success}`` shape.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.db.schemas import ApiResponse, UNEXPECTED_ERROR_MESSAGE
from common.api_error import AppError, ErrorKind, Failure, ServiceResult
from common.logger import get_app_logger

logger = get_app_logger(__name__)

_KIND_BY_STATUS = {
    400: ErrorKind.BAD_REQUEST,
    404: ErrorKind.NOT_FOUND,
    405: ErrorKind.METHOD_NOT_ALLOWED,
    409: ErrorKind.CONFLICT,
}


def failure_response(failure: Failure) -> JSONResponse:
    """Render a failure as the error envelope with its mapped status code."""
    message = failure.message
    if failure.kind is ErrorKind.UNEXPECTED:
        # Details stay in the server log
        message = UNEXPECTED_ERROR_MESSAGE

    body = ApiResponse.error(message=message, data=failure.data)
    return JSONResponse(
        status_code=failure.status_code,
        content=jsonable_encoder(body),
    )


def _to_wire(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, (list, tuple)):
        return [_to_wire(item) for item in data]
    return data


def success_response(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(ApiResponse.ok(_to_wire(data))),
    )


def respond(result: ServiceResult, status_code: int = 200) -> JSONResponse:
    """Dispatch a service result: envelope the value or translate the failure."""
    if not result.ok:
        return failure_response(result.failure)  # type: ignore[arg-type]
    return success_response(result.value, status_code)


def _first_path_error(errors: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
    for error in errors:
        loc = error.get("loc") or ()
        if loc and loc[0] == "path":
            return error
    return None


def translate_request_validation_error(exc: RequestValidationError) -> Failure:
    errors = list(exc.errors())

    path_error = _first_path_error(errors)
    if path_error is not None:
        param = path_error["loc"][-1]
        return Failure(
            kind=ErrorKind.BAD_REQUEST,
            message=(
                f"Invalid argument type: '{path_error.get('input')}' is not a valid "
                f"value for '{param}': {path_error['msg']}"
            ),
        )

    summary = "; ".join(error["msg"] for error in errors) or "invalid body"
    return Failure(
        kind=ErrorKind.BAD_REQUEST,
        message=f"Malformed request body: {summary}",
    )


def translate_http_exception(
    request: Request, exc: StarletteHTTPException
) -> Failure:
    kind = _KIND_BY_STATUS.get(exc.status_code)
    if exc.status_code == 404:
        message = f"No resource found for {request.method} {request.url.path}"
    elif exc.status_code == 405:
        message = (
            f"HTTP method not supported: Request method '{request.method}' "
            f"is not supported for {request.url.path}"
        )
    else:
        message = str(exc.detail)

    if kind is None:
        kind = ErrorKind.UNEXPECTED if exc.status_code >= 500 else ErrorKind.BAD_REQUEST
    return Failure(kind=kind, message=message)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    failure = translate_request_validation_error(exc)
    logger.warning(
        "Request rejected before reaching the service",
        path=request.url.path,
        method=request.method,
        message=failure.message,
    )
    return failure_response(failure)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    failure = translate_http_exception(request, exc)
    logger.warning(
        "HTTP error",
        path=request.url.path,
        method=request.method,
        status_code=exc.status_code,
    )
    response = failure_response(failure)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.kind is ErrorKind.UNEXPECTED:
        logger.exception(
            "Application error", path=request.url.path, error_code=exc.code
        )
    else:
        logger.warning(
            f"Domain Error: {exc.code}",
            path=request.url.path,
            error_code=exc.code,
            message=exc.message,
        )
    return failure_response(Failure.from_error(exc))


def unexpected_error_response(exc: Exception) -> JSONResponse:
    """500 envelope for an unhandled exception; the caller logs it."""
    return failure_response(Failure(kind=ErrorKind.UNEXPECTED, message=str(exc)))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "An unexpected error occurred",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return unexpected_error_response(exc)


def register_error_handlers(app: FastAPI) -> None:
    """Install the translator on ``app``; call once per application."""
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unexpected_error_handler)


__all__ = [
    "failure_response",
    "success_response",
    "respond",
    "unexpected_error_response",
    "translate_request_validation_error",
    "translate_http_exception",
    "register_error_handlers",
]
