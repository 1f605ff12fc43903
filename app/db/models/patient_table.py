# app/db/models/patient_table.py
from datetime import date
from sqlalchemy import String, Date, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from .db_base_model import DbBaseModel


class Patient(DbBaseModel):
    __tablename__ = "patient"
    # Backstop for the email check in PatientService
    __table_args__ = (UniqueConstraint("email", name="uq_patient_email"),)

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)

    address: Mapped[str] = mapped_column(String(500), nullable=False)

    registered_date: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"Patient(id={self.id!r}, email={self.email!r})"


__all__ = ["Patient"]
