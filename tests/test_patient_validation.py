from datetime import date

from app.api.v1.patient_validation import (
    INVALID_DATE_MESSAGE,
    INVALID_EMAIL_MESSAGE,
    is_valid_email,
    validate_email_param,
    validate_patient_payload,
)
from common.api_error import ErrorKind
from tests.conftest import make_payload

TODAY = date(2025, 6, 1)


def test_valid_payload_builds_view():
    result = validate_patient_payload(make_payload(), today=TODAY)

    assert result.ok
    assert result.value.name == "Ann"
    assert result.value.date_of_birth == "1990-01-01"
    assert result.value.registered_date == "2024-01-01"
    assert result.value.id is None


def test_today_is_allowed():
    result = validate_patient_payload(
        make_payload(dateOfBirth="2025-06-01", registeredDate="2025-06-01"),
        today=TODAY,
    )
    assert result.ok


def test_tomorrow_is_rejected():
    result = validate_patient_payload(
        make_payload(registeredDate="2025-06-02"), today=TODAY
    )

    assert result.failure.kind is ErrorKind.VALIDATION_FAILED
    assert result.failure.data == {
        "registeredDate": "Registered date must be in the past or present"
    }


def test_all_problems_reported_together():
    result = validate_patient_payload(
        {"name": "", "email": "bad", "dateOfBirth": "x", "address": None},
        today=TODAY,
    )

    assert result.failure.status_code == 400
    assert result.failure.message == "An error occurred"
    assert result.failure.data == {
        "name": "Name is required",
        "email": INVALID_EMAIL_MESSAGE,
        "dateOfBirth": INVALID_DATE_MESSAGE,
        "address": "Address is required",
        "registeredDate": "Registered date is required",
    }


def test_non_string_text_fields_rejected():
    result = validate_patient_payload(
        make_payload(name=42, address=["1 Rd"]), today=TODAY
    )
    assert result.failure.data == {
        "name": "Name must be a string",
        "address": "Address must be a string",
    }


def test_email_syntax():
    assert is_valid_email("ann@example.com")
    assert not is_valid_email("ann@")
    assert not is_valid_email("ann.example.com")


def test_validate_email_param():
    assert validate_email_param("ann@x.com").value == "ann@x.com"
    assert validate_email_param("nope").failure.data == {
        "email": INVALID_EMAIL_MESSAGE
    }
    assert validate_email_param(" ").failure.data == {"email": "Email is required"}
