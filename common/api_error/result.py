# common/api_error/result.py
"""
Explicit success/failure values returned by the service layer.

Services never raise for expected outcomes (missing record, duplicate email).
They return a ``ServiceResult`` and the error translator decides how the
failure is rendered.

Usage:
    result = await service.get_by_id(patient_id)
    if not result.ok:
        return failure_response(result.failure)
    return result.value
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from .ApiError import AppError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Failure:
    """A tagged failure: what went wrong and the message shown to the caller."""

    kind: ErrorKind
    message: str
    data: Optional[Any] = None

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @classmethod
    def from_error(cls, error: AppError) -> "Failure":
        return cls(kind=error.kind, message=error.message, data=error.data)


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    value: Optional[T] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def fail(
        cls, kind: ErrorKind, message: str, data: Optional[Any] = None
    ) -> "ServiceResult[T]":
        return cls(failure=Failure(kind=kind, message=message, data=data))

    @classmethod
    def not_found(cls, message: str) -> "ServiceResult[T]":
        return cls.fail(ErrorKind.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> "ServiceResult[T]":
        return cls.fail(ErrorKind.CONFLICT, message)


__all__ = ["Failure", "ServiceResult"]
