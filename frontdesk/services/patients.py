from __future__ import annotations

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from frontdesk.core.errors import PatientCreateError, require
from frontdesk.models.patient import Patient
from frontdesk.services.store import StoreError, TableStore


def validate_demographics(name: str | None, age: int | None) -> None:
    require(name and name.strip(), "patient name is required")
    require(age is not None, "patient age is required")
    require(age >= 0, "patient age cannot be negative")


def _clean_phone(phone: str | None) -> str | None:
    if not phone:
        return None
    cleaned = phone.strip()
    return cleaned or None


class PatientService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.store: TableStore[Patient] = TableStore(session, Patient)

    def list_patients(self) -> list[Patient]:
        return self.store.all(Patient.created_at.desc(), Patient.id.desc())

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(Patient))

    def register(self, *, name: str, age: int, phone: str | None = None) -> Patient:
        validate_demographics(name, age)
        return self._create(name=name, age=age, phone=phone)

    def resolve_or_register(
        self,
        *,
        patient_id: int | None = None,
        name: str | None = None,
        age: int | None = None,
        phone: str | None = None,
    ) -> Patient:
        if patient_id is None:
            validate_demographics(name, age)
            return self._create(name=name, age=age, phone=phone)

        logger.debug("Resolving patient id={patient_id}", patient_id=patient_id)
        try:
            existing = self.store.get(patient_id)
        except StoreError as exc:
            raise PatientCreateError(str(exc)) from exc
        if existing is None:
            raise PatientCreateError(f"no patients row with id {patient_id}", step="resolve patient record")
        return existing

    def _create(self, *, name: str, age: int, phone: str | None) -> Patient:
        try:
            patient = self.store.insert(name=name.strip(), age=age, phone=_clean_phone(phone))
        except StoreError as exc:
            raise PatientCreateError(str(exc)) from exc
        logger.info("Created patient id={patient_id} name={name}", patient_id=patient.id, name=patient.name)
        return patient


def get_patient_service(session: Session) -> PatientService:
    return PatientService(session=session)
