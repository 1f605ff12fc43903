# app/db/schemas/api_response.py
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_SUCCESS_MESSAGE = "Operation successful"
DEFAULT_ERROR_MESSAGE = "An error occurred"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapped around every response body."""

    data: Optional[T] = None
    message: str = Field(DEFAULT_SUCCESS_MESSAGE)
    success: bool = True

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ApiResponse[T]":
        return cls(data=data)

    @classmethod
    def error(
        cls, message: str = DEFAULT_ERROR_MESSAGE, data: Optional[T] = None
    ) -> "ApiResponse[T]":
        return cls(data=data, message=message, success=False)


__all__ = [
    "ApiResponse",
    "DEFAULT_SUCCESS_MESSAGE",
    "DEFAULT_ERROR_MESSAGE",
    "UNEXPECTED_ERROR_MESSAGE",
]
