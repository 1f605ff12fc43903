# app/services/v1/patient_mapper.py
import re
from datetime import date
from typing import Optional

from app.db.models import Patient
from app.db.schemas import PatientView
from common.api_error import InvalidFormatError

DATE_PATTERN = "yyyy-MM-dd"
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a ``yyyy-MM-dd`` string. ``None`` passes through.

    Raises:
        InvalidFormatError: If the value is not a real calendar date in that shape
    """
    if value is None:
        return None
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise InvalidFormatError(
            f"Invalid date format, expected '{DATE_PATTERN}': {value}"
        )
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidFormatError(
            f"Invalid date format, expected '{DATE_PATTERN}': {value}"
        ) from e


def format_date(value: Optional[date]) -> Optional[str]:
    # yyyy-MM-dd with a zero-padded year
    return value.isoformat() if value is not None else None


class PatientMapper:
    """Converts between the wire view and the persisted row."""

    def to_record(self, view: PatientView) -> Patient:
        return Patient(
            id=view.id,
            name=view.name,
            email=view.email,
            date_of_birth=parse_date(view.date_of_birth),
            address=view.address,
            registered_date=parse_date(view.registered_date),
        )

    def to_view(self, record: Patient) -> PatientView:
        return PatientView(
            id=record.id,
            name=record.name,
            email=record.email,
            date_of_birth=format_date(record.date_of_birth),
            address=record.address,
            registered_date=format_date(record.registered_date),
        )


__all__ = ["PatientMapper", "parse_date", "format_date", "DATE_PATTERN"]
