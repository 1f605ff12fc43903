"""
Shared pytest fixtures.

Every test gets its own SQLite file with the schema created from the ORM
metadata, so tests never see each other's rows.

Fixture Hierarchy:
    temp_db_path -> db_manager -> test_app -> client
    temp_db_path -> async_db_manager -> session -> patient_service
"""
import asyncio
import logging
import os
import tempfile

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.application import create_app
from app.db import DbManager
from app.db.models import DbBaseModel
from app.db.repositories import PatientRepository
from app.services.v1 import PatientMapper, PatientService
from common.config import (
    AppConfig,
    EnvLogLevel,
    Environment,
    LoggingConfig,
    configure_structlog,
)

# Module loggers resolve lazily but still need structlog set up once
configure_structlog(logging.WARNING)

ANN = {
    "name": "Ann",
    "email": "ann@x.com",
    "dateOfBirth": "1990-01-01",
    "address": "1 Rd",
    "registeredDate": "2024-01-01",
}


def make_payload(**overrides):
    payload = dict(ANN)
    payload.update(overrides)
    return payload


def make_config(environment: Environment = Environment.DEVELOPMENT) -> AppConfig:
    return AppConfig(
        app_title="Patient Service Test",
        app_version="1.0.0",
        environment=environment,
        logging=LoggingConfig(log_level=EnvLogLevel.WARNING),
    )


async def _create_schema(manager: DbManager) -> None:
    async with manager.engine.begin() as conn:
        await conn.run_sync(DbBaseModel.metadata.create_all)


@pytest.fixture
def temp_db_path():
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield db_path

    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def db_manager(temp_db_path):
    """DbManager on a fresh SQLite file with the patient table created."""
    manager = DbManager(f"sqlite+aiosqlite:///{temp_db_path}")
    asyncio.run(_create_schema(manager))

    yield manager

    asyncio.run(manager.dispose())


@pytest_asyncio.fixture
async def async_db_manager(temp_db_path):
    """Same as ``db_manager`` but built inside the test's event loop."""
    manager = DbManager(f"sqlite+aiosqlite:///{temp_db_path}")
    await _create_schema(manager)

    yield manager

    await manager.dispose()


@pytest.fixture
def test_app(db_manager):
    """The real application wired to the test database."""
    app = create_app(make_config())
    app.state.db_manager = db_manager

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    # One portal (and event loop) for every request in the test
    with TestClient(test_app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def session(async_db_manager):
    async with async_db_manager.session() as db_session:
        yield db_session


@pytest.fixture
def patient_repository(session):
    return PatientRepository(session)


@pytest.fixture
def patient_service(patient_repository):
    return PatientService(patient_repository, PatientMapper())
