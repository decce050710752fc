from __future__ import annotations

from datetime import datetime

from loguru import logger
from sqlalchemy.orm import Session

from frontdesk.core.config import AppConfig, get_settings
from frontdesk.core.errors import (
    AppointmentCreateError,
    AppointmentUpdateError,
    StatusTransitionError,
    ValidationError,
    require,
)
from frontdesk.models.appointment import (
    APPOINTMENT_STATUSES,
    COMPLETED,
    IN_PROGRESS,
    WAITING,
    Appointment,
)
from frontdesk.models.patient import Patient
from frontdesk.services.patients import PatientService, validate_demographics
from frontdesk.services.queue import QueueAllocator
from frontdesk.services.store import StoreError, TableStore
from frontdesk.utils.time import local_date, local_today, parse_appointment_time


class AppointmentService:
    def __init__(
        self,
        *,
        session: Session,
        patient_service: PatientService | None = None,
        settings: AppConfig | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.patient_service = patient_service or PatientService(session=session)
        self.store: TableStore[Appointment] = TableStore(session, Appointment)
        self.allocator = QueueAllocator(self.store, mode=self.settings.queue_allocation_mode)

    def next_queue_number(self) -> int:
        return self.allocator.next_queue_number()

    def book(
        self,
        *,
        name: str,
        age: int,
        phone: str | None = None,
        appointment_time: str | datetime | None = None,
    ) -> Appointment:
        """Register a walk-in patient and put them at the back of the OPD queue.

        The patient row is written first and is kept even when the appointment insert
        is rejected; the resulting ``AppointmentCreateError`` carries its id.
        """
        validate_demographics(name, age)
        scheduled = self._scheduled_time(appointment_time)

        patient = self.patient_service.register(name=name, age=age, phone=phone)
        return self._insert(patient=patient, scheduled=scheduled)

    def book_for_patient(self, *, patient_id: int, appointment_time: str | datetime | None = None) -> Appointment:
        scheduled = self._scheduled_time(appointment_time)
        patient = self.patient_service.resolve_or_register(patient_id=patient_id)
        return self._insert(patient=patient, scheduled=scheduled)

    def update_status(self, appointment_id: int, status: str) -> Appointment:
        require(status in APPOINTMENT_STATUSES, f"unknown appointment status '{status}'")

        try:
            current = self.store.get(appointment_id)
        except StoreError as exc:
            raise AppointmentUpdateError(str(exc)) from exc
        if current is None:
            raise AppointmentUpdateError(f"no appointments row with id {appointment_id}")

        if current.status == status:
            return current
        if APPOINTMENT_STATUSES.index(status) < APPOINTMENT_STATUSES.index(current.status):
            raise StatusTransitionError(f"appointment {appointment_id} cannot go from {current.status} back to {status}")

        try:
            updated = self.store.update(appointment_id, status=status)
        except StoreError as exc:
            raise AppointmentUpdateError(str(exc)) from exc
        logger.info(
            "Appointment id={appointment_id} #{number} {old} -> {new}",
            appointment_id=appointment_id,
            number=updated.queue_number,
            old=current.status,
            new=status,
        )
        return updated

    def list_appointments(self) -> list[Appointment]:
        return self.store.all(Appointment.queue_number, Appointment.id)

    def waiting(self) -> list[Appointment]:
        return self.store.query(Appointment.status == WAITING, order_by=[Appointment.queue_number, Appointment.id])

    def in_progress(self) -> list[Appointment]:
        return self.store.query(Appointment.status == IN_PROGRESS, order_by=[Appointment.queue_number, Appointment.id])

    def completed_today(self) -> list[Appointment]:
        completed = self.store.query(Appointment.status == COMPLETED, order_by=[Appointment.queue_number])
        return self._on_today(completed)

    def today(self) -> list[Appointment]:
        """Every appointment scheduled for today, whatever its status."""
        return self._on_today(self.list_appointments())

    def _on_today(self, appointments: list[Appointment]) -> list[Appointment]:
        today = local_today(self.settings.timezone)
        return [
            appointment
            for appointment in appointments
            if local_date(appointment.appointment_time, self.settings.timezone) == today
        ]

    def _scheduled_time(self, value: str | datetime | None) -> datetime:
        scheduled = parse_appointment_time(value, self.settings.timezone)
        if scheduled is None:
            raise ValidationError(f"could not understand appointment time '{value}'")
        return scheduled

    def _insert(self, *, patient: Patient, scheduled: datetime) -> Appointment:
        # "null" reproduces the legacy dashboard, which never stored the patient link
        patient_id = patient.id if self.settings.appointment_patient_link == "enforce" else None
        try:
            appointment = self.allocator.allocate(
                patient_id=patient_id,
                patient_name=patient.name,
                appointment_time=scheduled,
            )
        except StoreError as exc:
            raise AppointmentCreateError(str(exc), partial={"patient_id": patient.id}) from exc

        logger.info(
            "Booked appointment id={appointment_id} queue #{number} for {name}",
            appointment_id=appointment.id,
            number=appointment.queue_number,
            name=appointment.patient_name,
        )
        return appointment


def get_appointment_service(session: Session) -> AppointmentService:
    return AppointmentService(session=session)
