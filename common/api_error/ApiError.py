# common/api_error/ApiError.py
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """
    Failure kinds understood by the error translator.

    Each kind maps to exactly one HTTP status code.
    """

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    BAD_REQUEST = "BAD_REQUEST"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    UNEXPECTED = "UNEXPECTED"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    def __str__(self) -> str:
        return self.value


_STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.METHOD_NOT_ALLOWED: 405,
    ErrorKind.UNEXPECTED: 500,
}


class AppError(Exception):
    """Base error for all application-specific issues."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNEXPECTED,
        data: Optional[Any] = None,
    ):
        self.message = message
        self.kind = kind
        self.data = data
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def code(self) -> str:
        return self.kind.value


class InvalidFormatError(AppError):
    """A wire value could not be parsed into its persisted type."""

    def __init__(self, message: str):
        super().__init__(message, kind=ErrorKind.BAD_REQUEST)


__all__ = ["ErrorKind", "AppError", "InvalidFormatError"]
