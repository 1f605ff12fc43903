# app/api/v1/dependencies.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.db.repositories import PatientRepository
from app.services.v1 import PatientMapper, PatientService


def get_patient_mapper() -> PatientMapper:
    return PatientMapper()


def get_patient_service(
    db: AsyncSession = Depends(get_db),
    mapper: PatientMapper = Depends(get_patient_mapper),
) -> PatientService:
    """Wire a service to the request's session."""
    return PatientService(PatientRepository(db), mapper)


__all__ = ["get_patient_service", "get_patient_mapper"]
