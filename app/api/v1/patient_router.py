# app/api/v1/patient_router.py
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from app.api.error_translator import respond, success_response
from app.db.schemas import ApiResponse, PatientView
from app.services.v1 import PatientService
from .dependencies import get_patient_service
from .patient_validation import validate_email_param, validate_patient_payload

patient_router = APIRouter(
    prefix="/patients",
    tags=["Patients"],
)

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"description": "Invalid argument or failed validation"},
    500: {"description": "Unexpected server error"},
}


@patient_router.get(
    "",
    response_model=ApiResponse[list[PatientView]],
    status_code=status.HTTP_200_OK,
    summary="List patients",
)
async def list_patients(
    service: PatientService = Depends(get_patient_service),
) -> JSONResponse:
    patients = await service.list_all()
    return success_response(patients)


@patient_router.get(
    "/{patient_id}",
    response_model=ApiResponse[PatientView],
    status_code=status.HTTP_200_OK,
    summary="Get patient by id",
    responses={404: {"description": "Patient not found"}, **_ERROR_RESPONSES},
)
async def get_patient(
    patient_id: UUID,
    service: PatientService = Depends(get_patient_service),
) -> JSONResponse:
    return respond(await service.get_by_id(patient_id))


@patient_router.get(
    "/email/{email}",
    response_model=ApiResponse[PatientView],
    status_code=status.HTTP_200_OK,
    summary="Get patient by email",
    responses={404: {"description": "Patient not found"}},
)
async def get_patient_by_email(
    email: str,
    service: PatientService = Depends(get_patient_service),
) -> JSONResponse:
    return respond(await service.get_by_email(email))


@patient_router.post(
    "",
    response_model=ApiResponse[PatientView],
    status_code=status.HTTP_201_CREATED,
    summary="Create patient",
    description="""
    Registers a new patient. The email address must not belong to any other
    patient; an `id` in the body is ignored.
    """,
    responses={409: {"description": "Email already registered"}, **_ERROR_RESPONSES},
)
async def create_patient(
    payload: dict[str, Any] = Body(...),
    service: PatientService = Depends(get_patient_service),
) -> JSONResponse:
    validated = validate_patient_payload(payload)
    if not validated.ok:
        return respond(validated)

    return respond(
        await service.create(validated.value),  # type: ignore[arg-type]
        status.HTTP_201_CREATED,
    )


@patient_router.put(
    "/{patient_id}",
    response_model=ApiResponse[PatientView],
    status_code=status.HTTP_202_ACCEPTED,
    summary="Replace patient",
    description="""
    Overwrites every field of an existing patient. The new email may be the
    patient's own but not one registered to a different patient.
    """,
    responses={
        404: {"description": "Patient not found"},
        409: {"description": "Email registered to another patient"},
        **_ERROR_RESPONSES,
    },
)
async def update_patient(
    patient_id: UUID,
    payload: dict[str, Any] = Body(...),
    service: PatientService = Depends(get_patient_service),
) -> JSONResponse:
    validated = validate_patient_payload(payload)
    if not validated.ok:
        return respond(validated)

    return respond(
        await service.update(patient_id, validated.value),  # type: ignore[arg-type]
        status.HTTP_202_ACCEPTED,
    )


@patient_router.delete(
    "/{patient_id}",
    response_model=ApiResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Delete patient by id",
    responses={404: {"description": "Patient not found"}, **_ERROR_RESPONSES},
)
async def delete_patient(
    patient_id: UUID,
    service: PatientService = Depends(get_patient_service),
) -> JSONResponse:
    return respond(await service.delete_by_id(patient_id), status.HTTP_202_ACCEPTED)


@patient_router.delete(
    "/email/{email}",
    response_model=ApiResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Delete patient by email",
    responses={404: {"description": "Patient not found"}, **_ERROR_RESPONSES},
)
async def delete_patient_by_email(
    email: str,
    service: PatientService = Depends(get_patient_service),
) -> JSONResponse:
    checked = validate_email_param(email)
    if not checked.ok:
        return respond(checked)

    return respond(await service.delete_by_email(email), status.HTTP_202_ACCEPTED)


__all__ = ["patient_router"]
