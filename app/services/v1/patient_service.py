# app/services/v1/patient_service.py
"""
Business rules for patient records.

Expected outcomes (missing record, email already taken) are returned as
``ServiceResult`` failures instead of being raised, so the HTTP layer can
hand them straight to the error translator.
"""

from uuid import UUID
from typing import Union

from sqlalchemy.exc import IntegrityError

from app.db.repositories import PatientRepository
from app.db.schemas import PatientView
from common.api_error import ErrorKind, InvalidFormatError, ServiceResult
from common.logger import get_app_logger
from .patient_mapper import PatientMapper

logger = get_app_logger(__name__)

ERROR_MESSAGE_NOT_FOUND_BY_ID = "Patient not found with ID: {}"
ERROR_MESSAGE_NOT_FOUND_BY_EMAIL = "Patient not found with email: {}"
ERROR_MESSAGE_ALREADY_EXISTS_BY_EMAIL = (
    "Patient already exists with the provided email address {}"
)

PatientId = Union[UUID, str]


class PatientService:
    def __init__(self, repository: PatientRepository, mapper: PatientMapper):
        self.repository = repository
        self.mapper = mapper

    async def list_all(self) -> list[PatientView]:
        logger.info("Retrieving all patients")
        patients = await self.repository.find_all()
        return [self.mapper.to_view(patient) for patient in patients]

    async def get_by_id(self, patient_id: PatientId) -> ServiceResult[PatientView]:
        logger.info("Retrieving patient", patient_id=str(patient_id))
        patient = await self.repository.find_by_id(str(patient_id))
        if patient is None:
            return ServiceResult.not_found(
                ERROR_MESSAGE_NOT_FOUND_BY_ID.format(str(patient_id))
            )
        return ServiceResult.success(self.mapper.to_view(patient))

    async def get_by_email(self, email: str) -> ServiceResult[PatientView]:
        logger.info("Retrieving patient", email=email)
        patient = await self.repository.find_by_email(email)
        if patient is None:
            return ServiceResult.not_found(
                ERROR_MESSAGE_NOT_FOUND_BY_EMAIL.format(email)
            )
        return ServiceResult.success(self.mapper.to_view(patient))

    async def create(self, view: PatientView) -> ServiceResult[PatientView]:
        logger.info("Creating patient", email=view.email)

        if await self.repository.exists_by_email(view.email):
            logger.warning("Email already registered", email=view.email)
            return ServiceResult.conflict(
                ERROR_MESSAGE_ALREADY_EXISTS_BY_EMAIL.format(view.email)
            )

        # A client-supplied id is never honoured on create
        return await self._write(view.model_copy(update={"id": None}))

    async def update(
        self, patient_id: PatientId, view: PatientView
    ) -> ServiceResult[PatientView]:
        """
        Replace every field of the patient at ``patient_id`` with ``view``.

        Existence is checked before email ownership, so an unknown id is
        reported as NOT_FOUND even when the email would also conflict.
        """
        patient_id = str(patient_id)
        log = logger.bind(patient_id=patient_id)
        log.info("Updating patient")

        if not await self.repository.exists_by_id(patient_id):
            return ServiceResult.not_found(
                ERROR_MESSAGE_NOT_FOUND_BY_ID.format(str(patient_id))
            )

        if await self.repository.exists_by_email_excluding_id(view.email, patient_id):
            log.warning("Email owned by another patient", email=view.email)
            return ServiceResult.conflict(
                ERROR_MESSAGE_ALREADY_EXISTS_BY_EMAIL.format(view.email)
            )

        return await self._write(view.model_copy(update={"id": patient_id}))

    async def delete_by_id(self, patient_id: PatientId) -> ServiceResult[None]:
        logger.info("Deleting patient", patient_id=str(patient_id))
        patient = await self.repository.find_by_id(str(patient_id))
        if patient is None:
            return ServiceResult.not_found(
                ERROR_MESSAGE_NOT_FOUND_BY_ID.format(str(patient_id))
            )
        await self.repository.delete(patient)
        return ServiceResult.success()

    async def delete_by_email(self, email: str) -> ServiceResult[None]:
        logger.info("Deleting patient", email=email)
        patient = await self.repository.find_by_email(email)
        if patient is None:
            return ServiceResult.not_found(
                ERROR_MESSAGE_NOT_FOUND_BY_EMAIL.format(email)
            )
        await self.repository.delete(patient)
        return ServiceResult.success()

    async def _write(self, view: PatientView) -> ServiceResult[PatientView]:
        try:
            record = self.mapper.to_record(view)
        except InvalidFormatError as e:
            return ServiceResult.fail(e.kind, f"Invalid argument: {e.message}")

        try:
            saved = await self.repository.save(record)
        except IntegrityError:
            # Lost a race with a concurrent writer; the unique constraint caught it
            logger.warning("Unique constraint rejected write", email=view.email)
            return ServiceResult.fail(
                ErrorKind.CONFLICT,
                ERROR_MESSAGE_ALREADY_EXISTS_BY_EMAIL.format(view.email),
            )

        logger.info("Patient saved", patient_id=saved.id)
        return ServiceResult.success(self.mapper.to_view(saved))


__all__ = [
    "PatientService",
    "ERROR_MESSAGE_NOT_FOUND_BY_ID",
    "ERROR_MESSAGE_NOT_FOUND_BY_EMAIL",
    "ERROR_MESSAGE_ALREADY_EXISTS_BY_EMAIL",
]
