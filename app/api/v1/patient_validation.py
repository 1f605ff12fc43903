# app/api/v1/patient_validation.py
"""
Request validation for patient payloads.

Runs before the service is called and collects every problem at once into
a ``{field: message}`` map keyed by wire field name.
"""

from datetime import date
from typing import Any, Mapping, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.db.schemas import DEFAULT_ERROR_MESSAGE, PatientView
from app.services.v1 import DATE_PATTERN, parse_date
from common.api_error import ErrorKind, InvalidFormatError, ServiceResult

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)

INVALID_EMAIL_MESSAGE = "Email should be valid"
INVALID_DATE_MESSAGE = f"Invalid date format, expected '{DATE_PATTERN}'"

# wire field -> message when absent or blank
_REQUIRED_MESSAGES = {
    "name": "Name is required",
    "email": "Email is required",
    "dateOfBirth": "Date of birth is required",
    "address": "Address is required",
    "registeredDate": "Registered date is required",
}

_NOT_TEXT_MESSAGES = {
    "name": "Name must be a string",
    "email": "Email must be a string",
    "address": "Address must be a string",
}

_FUTURE_DATE_MESSAGES = {
    "dateOfBirth": "Date of birth must be in the past or present",
    "registeredDate": "Registered date must be in the past or present",
}


def is_valid_email(value: str) -> bool:
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_text(field: str, value: Any, errors: dict[str, str]) -> None:
    if _is_blank(value):
        errors[field] = _REQUIRED_MESSAGES[field]
    elif not isinstance(value, str):
        errors[field] = _NOT_TEXT_MESSAGES[field]


def _check_date(
    field: str, value: Any, today: date, errors: dict[str, str]
) -> None:
    if _is_blank(value):
        errors[field] = _REQUIRED_MESSAGES[field]
        return
    try:
        parsed = parse_date(value)
    except InvalidFormatError:
        errors[field] = INVALID_DATE_MESSAGE
        return
    if parsed is not None and parsed > today:
        errors[field] = _FUTURE_DATE_MESSAGES[field]


def validate_patient_payload(
    payload: Mapping[str, Any],
    *,
    today: Optional[date] = None,
) -> ServiceResult[PatientView]:
    """
    Validate a create/update body and build the ``PatientView`` from it.

    Args:
        payload: Decoded JSON object from the request body
        today: Reference date for the "not in the future" rules

    Returns:
        ServiceResult holding the view, or a VALIDATION_FAILED failure whose
        ``data`` maps wire field names to messages.
    """
    today = today or date.today()
    errors: dict[str, str] = {}

    _check_text("name", payload.get("name"), errors)
    _check_text("email", payload.get("email"), errors)
    if "email" not in errors and not is_valid_email(payload["email"]):
        errors["email"] = INVALID_EMAIL_MESSAGE
    _check_date("dateOfBirth", payload.get("dateOfBirth"), today, errors)
    _check_text("address", payload.get("address"), errors)
    _check_date("registeredDate", payload.get("registeredDate"), today, errors)

    if errors:
        return ServiceResult.fail(
            ErrorKind.VALIDATION_FAILED, DEFAULT_ERROR_MESSAGE, data=errors
        )

    return ServiceResult.success(
        PatientView(
            name=payload["name"],
            email=payload["email"],
            date_of_birth=payload["dateOfBirth"],
            address=payload["address"],
            registered_date=payload["registeredDate"],
        )
    )


def validate_email_param(email: str) -> ServiceResult[str]:
    if _is_blank(email):
        return ServiceResult.fail(
            ErrorKind.VALIDATION_FAILED,
            DEFAULT_ERROR_MESSAGE,
            data={"email": _REQUIRED_MESSAGES["email"]},
        )
    if not is_valid_email(email):
        return ServiceResult.fail(
            ErrorKind.VALIDATION_FAILED,
            DEFAULT_ERROR_MESSAGE,
            data={"email": INVALID_EMAIL_MESSAGE},
        )
    return ServiceResult.success(email)


__all__ = [
    "validate_patient_payload",
    "validate_email_param",
    "is_valid_email",
    "INVALID_EMAIL_MESSAGE",
    "INVALID_DATE_MESSAGE",
]
