# app/db/schemas/patient_schema.py
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class PatientView(BaseModel):
    """
    Wire representation of a patient.

    Dates travel as ``yyyy-MM-dd`` strings and field names are camelCase on
    the wire (``dateOfBirth``, ``registeredDate``). ``id`` is ignored on
    requests and always present on responses. Unknown fields are dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "Ann",
                "email": "ann@x.com",
                "dateOfBirth": "1990-01-01",
                "address": "1 Rd",
                "registeredDate": "2024-01-01",
            }
        },
    )

    id: Optional[str] = Field(None, description="Patient identifier (UUID)")
    name: str = Field(..., description="Full name")
    email: str = Field(..., description="Unique email address")
    date_of_birth: str = Field(..., description="yyyy-MM-dd")
    address: str = Field(..., description="Postal address")
    registered_date: Optional[str] = Field(None, description="yyyy-MM-dd")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


__all__ = ["PatientView"]
