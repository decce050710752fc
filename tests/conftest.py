from __future__ import annotations

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from frontdesk.api.deps import get_app_settings
from frontdesk.core.config import AppConfig
from frontdesk.main import app
from frontdesk.services.admissions import AdmissionWorkflow
from frontdesk.services.appointments import AppointmentService
from frontdesk.services.beds import BedService
from frontdesk.services.db import build_engine, build_session_factory, get_db, init_db
from frontdesk.services.inventory import InventoryService
from frontdesk.services.patients import PatientService


@pytest.fixture
def settings() -> AppConfig:
    return AppConfig(_env_file=None, PRIMARY_TIMEZONE="UTC", DATABASE_URL="sqlite://")


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def patients(session) -> PatientService:
    return PatientService(session=session)


@pytest.fixture
def appointments(session, settings) -> AppointmentService:
    return AppointmentService(session=session, settings=settings)


@pytest.fixture
def beds(session) -> BedService:
    return BedService(session=session)


@pytest.fixture
def workflow(session, settings, beds) -> AdmissionWorkflow:
    return AdmissionWorkflow(session=session, settings=settings, bed_service=beds)


@pytest.fixture
def inventory(session, settings) -> InventoryService:
    return InventoryService(session=session, settings=settings)


@pytest.fixture
def client(session, settings) -> Generator[TestClient, None, None]:
    def _get_db() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_app_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
