"""
Service-level tests against a real (temporary SQLite) session.
Failures come back as ServiceResult values, never as exceptions.
"""
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.db.repositories import PatientRepository
from app.db.schemas import PatientView
from app.services.v1 import PatientMapper, PatientService
from common.api_error import ErrorKind


def make_view(**overrides) -> PatientView:
    fields = {
        "name": "Ann",
        "email": "ann@x.com",
        "date_of_birth": "1990-01-01",
        "address": "1 Rd",
        "registered_date": "2024-01-01",
    }
    fields.update(overrides)
    return PatientView(**fields)


async def test_create_then_get_by_id(patient_service):
    created = await patient_service.create(make_view())

    assert created.ok
    assert created.value.id

    fetched = await patient_service.get_by_id(created.value.id)
    assert fetched.ok
    assert fetched.value == created.value


async def test_create_ignores_supplied_id(patient_service):
    supplied = str(uuid4())

    created = await patient_service.create(make_view(id=supplied))

    assert created.value.id != supplied


async def test_create_duplicate_email_is_conflict(patient_service):
    await patient_service.create(make_view())

    result = await patient_service.create(make_view(name="Someone Else"))

    assert not result.ok
    assert result.failure.kind is ErrorKind.CONFLICT
    assert result.failure.status_code == 409
    assert result.failure.message == (
        "Patient already exists with the provided email address ann@x.com"
    )
    assert len(await patient_service.list_all()) == 1


async def test_get_missing_is_not_found(patient_service):
    missing = uuid4()

    result = await patient_service.get_by_id(missing)

    assert result.failure.kind is ErrorKind.NOT_FOUND
    assert result.failure.message == f"Patient not found with ID: {missing}"


async def test_get_by_email(patient_service):
    created = await patient_service.create(make_view())

    result = await patient_service.get_by_email("ann@x.com")
    assert result.value == created.value

    missing = await patient_service.get_by_email("nobody@x.com")
    assert missing.failure.message == "Patient not found with email: nobody@x.com"


async def test_update_replaces_all_fields(patient_service):
    created = await patient_service.create(make_view())

    result = await patient_service.update(
        created.value.id,
        make_view(name="Ann B", address="2 Rd", date_of_birth="1991-02-03"),
    )

    assert result.ok
    assert result.value.id == created.value.id
    assert result.value.name == "Ann B"
    assert result.value.address == "2 Rd"
    assert result.value.date_of_birth == "1991-02-03"


async def test_update_not_found_takes_precedence_over_conflict(patient_service):
    await patient_service.create(make_view())

    result = await patient_service.update(uuid4(), make_view())

    assert result.failure.kind is ErrorKind.NOT_FOUND


async def test_update_to_taken_email_is_conflict(patient_service):
    await patient_service.create(make_view())
    bob = await patient_service.create(make_view(name="Bob", email="bob@x.com"))

    result = await patient_service.update(bob.value.id, make_view(name="Bob"))

    assert result.failure.kind is ErrorKind.CONFLICT
    unchanged = await patient_service.get_by_id(bob.value.id)
    assert unchanged.value.email == "bob@x.com"


async def test_update_with_bad_date_is_bad_request(patient_service):
    created = await patient_service.create(make_view())

    result = await patient_service.update(
        created.value.id, make_view(date_of_birth="1990/01/01")
    )

    assert result.failure.kind is ErrorKind.BAD_REQUEST
    assert result.failure.message.startswith("Invalid argument: Invalid date format")


async def test_delete_by_id_and_email(patient_service):
    ann = await patient_service.create(make_view())
    await patient_service.create(make_view(name="Bob", email="bob@x.com"))

    assert (await patient_service.delete_by_id(ann.value.id)).ok
    assert (await patient_service.delete_by_email("bob@x.com")).ok
    assert await patient_service.list_all() == []

    again = await patient_service.delete_by_id(ann.value.id)
    assert again.failure.kind is ErrorKind.NOT_FOUND
    missing = await patient_service.delete_by_email("bob@x.com")
    assert missing.failure.kind is ErrorKind.NOT_FOUND


class _BlindRepository(PatientRepository):
    """Skips the pre-check so the unique constraint has to catch the duplicate."""

    async def exists_by_email(self, email: str) -> bool:
        return False


async def test_unique_constraint_backstop_maps_to_conflict(async_db_manager):
    async with async_db_manager.session() as session:
        service = PatientService(PatientRepository(session), PatientMapper())
        assert (await service.create(make_view())).ok

    async with async_db_manager.session() as session:
        service = PatientService(_BlindRepository(session), PatientMapper())
        result = await service.create(make_view(name="Ann Again"))

    assert result.failure.kind is ErrorKind.CONFLICT

    async with async_db_manager.session() as session:
        assert len(await PatientRepository(session).find_all()) == 1


async def test_repository_save_raises_on_duplicate(async_db_manager):
    mapper = PatientMapper()
    async with async_db_manager.session() as session:
        await PatientRepository(session).save(mapper.to_record(make_view()))

    async with async_db_manager.session() as session:
        repository = PatientRepository(session)
        with pytest.raises(IntegrityError):
            await repository.save(mapper.to_record(make_view(name="Dup")))
        assert await repository.exists_by_email("ann@x.com")
