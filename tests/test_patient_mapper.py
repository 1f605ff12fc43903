from datetime import date

import pytest

from app.db.models import Patient
from app.db.schemas import PatientView
from app.services.v1 import PatientMapper, format_date, parse_date
from common.api_error import ErrorKind, InvalidFormatError


@pytest.fixture
def mapper():
    return PatientMapper()


def test_to_record_parses_dates(mapper):
    view = PatientView(
        name="Ann",
        email="ann@x.com",
        date_of_birth="1990-01-01",
        address="1 Rd",
        registered_date="2024-01-01",
    )

    record = mapper.to_record(view)

    assert record.id is None
    assert record.date_of_birth == date(1990, 1, 1)
    assert record.registered_date == date(2024, 1, 1)


def test_to_view_formats_dates(mapper):
    record = Patient(
        id="3f2b7a9e-0000-4000-8000-000000000001",
        name="Ann",
        email="ann@x.com",
        date_of_birth=date(1990, 1, 1),
        address="1 Rd",
        registered_date=date(2024, 1, 1),
    )

    view = mapper.to_view(record)

    assert view.to_wire() == {
        "id": "3f2b7a9e-0000-4000-8000-000000000001",
        "name": "Ann",
        "email": "ann@x.com",
        "dateOfBirth": "1990-01-01",
        "address": "1 Rd",
        "registeredDate": "2024-01-01",
    }


def test_missing_registered_date_passes_through(mapper):
    view = PatientView(
        name="Ann",
        email="ann@x.com",
        date_of_birth="1990-01-01",
        address="1 Rd",
    )
    assert mapper.to_record(view).registered_date is None


@pytest.mark.parametrize("value", ["1990/01/01", "90-01-01", "1990-13-01", "1990-02-30", ""])
def test_parse_date_rejects_bad_values(value):
    with pytest.raises(InvalidFormatError) as exc_info:
        parse_date(value)

    assert exc_info.value.kind is ErrorKind.BAD_REQUEST
    assert exc_info.value.message == (
        f"Invalid date format, expected 'yyyy-MM-dd': {value}"
    )


def test_format_date_pads_year():
    assert format_date(date(5, 3, 9)) == "0005-03-09"
    assert format_date(None) is None


@pytest.mark.parametrize(
    "view",
    [
        PatientView(
            name="Ann",
            email="ann@x.com",
            date_of_birth="1990-01-01",
            address="1 Rd",
            registered_date="2024-01-01",
        ),
        PatientView(
            id="3f2b7a9e-0000-4000-8000-000000000001",
            name="Bob",
            email="bob@x.com",
            date_of_birth="0099-01-01",
            address="2 Rd",
            registered_date="2000-02-29",
        ),
        PatientView(
            name="Cid",
            email="cid@x.com",
            date_of_birth="1985-12-31",
            address="3 Rd",
            registered_date=None,
        ),
    ],
    ids=["no-id", "with-id-padded-year", "no-registered-date"],
)
def test_view_survives_record_round_trip(mapper, view):
    assert mapper.to_view(mapper.to_record(view)) == view
