# app/db/repositories/patient_repository.py
from typing import Optional, Sequence

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Patient


class PatientRepository:
    """
    Data access for the ``patient`` table.

    Every method works inside the caller's session; committing is left to
    the session owner (``DbManager.session``).
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_all(self) -> Sequence[Patient]:
        query = select(Patient).execution_options(
            logging_token="PatientRepository.find_all"
        )
        result = await self.db.execute(query)
        return result.scalars().all()

    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        query = (
            select(Patient)
            .where(Patient.id == patient_id)
            .execution_options(logging_token="PatientRepository.find_by_id")
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[Patient]:
        query = (
            select(Patient)
            .where(Patient.email == email)
            .execution_options(logging_token="PatientRepository.find_by_email")
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def exists_by_id(self, patient_id: str) -> bool:
        query = select(exists().where(Patient.id == patient_id))
        return bool(await self.db.scalar(query))

    async def exists_by_email(self, email: str) -> bool:
        query = select(exists().where(Patient.email == email))
        return bool(await self.db.scalar(query))

    async def exists_by_email_excluding_id(self, email: str, patient_id: str) -> bool:
        """True when ``email`` is used by any patient other than ``patient_id``."""
        query = select(
            exists().where(Patient.email == email, Patient.id != patient_id)
        )
        return bool(await self.db.scalar(query))

    async def save(self, patient: Patient) -> Patient:
        """
        Insert a new patient or overwrite the row with the same id.

        Returns the persistent instance, which is not necessarily the one
        passed in.

        Raises:
            IntegrityError: If the store rejects the row (e.g. duplicate email).
                The session is rolled back before the error propagates.
        """
        merged = await self.db.merge(patient)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise
        await self.db.refresh(merged)
        return merged

    async def delete(self, patient: Patient) -> None:
        await self.db.delete(patient)
        await self.db.flush()


__all__ = ["PatientRepository"]
