from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from frontdesk.core.errors import (
    AppointmentCreateError,
    AppointmentUpdateError,
    PatientCreateError,
    StatusTransitionError,
    ValidationError,
)
from frontdesk.models import Patient
from frontdesk.services.appointments import AppointmentService
from frontdesk.services.store import StoreError


def test_booking_registers_patient_and_links_it(appointments, session):
    appointment = appointments.book(name="  Priya ", age=34, phone="555 0102")

    patient = session.get(Patient, appointment.patient_id)
    assert patient.name == "Priya"
    assert appointment.patient_name == "Priya"
    assert appointment.status == "waiting"


def test_legacy_link_mode_leaves_patient_id_empty(session, settings):
    legacy = AppointmentService(session=session, settings=settings.model_copy(update={"appointment_patient_link": "null"}))

    appointment = legacy.book(name="Legacy", age=50)

    assert appointment.patient_id is None
    assert appointment.patient_name == "Legacy"
    assert session.query(Patient).count() == 1


def test_book_for_existing_patient(appointments, patients):
    patient = patients.register(name="Hari", age=44)

    appointment = appointments.book_for_patient(patient_id=patient.id)

    assert appointment.patient_id == patient.id
    assert appointment.patient_name == "Hari"


def test_book_for_unknown_patient(appointments):
    with pytest.raises(PatientCreateError):
        appointments.book_for_patient(patient_id=999)


def test_rejected_appointment_keeps_patient(appointments, session, monkeypatch):
    def reject(**values):
        raise StoreError("appointments insert failed")

    monkeypatch.setattr(appointments.store, "insert", reject)

    with pytest.raises(AppointmentCreateError) as excinfo:
        appointments.book(name="Zoya", age=22)

    assert session.get(Patient, excinfo.value.partial["patient_id"]).name == "Zoya"
    assert excinfo.value.describe() == "Failed to book appointment: appointments insert failed"


def test_unreadable_time_is_rejected_before_writing(appointments, session):
    with pytest.raises(ValidationError):
        appointments.book(name="Time", age=30, appointment_time="??")

    assert session.query(Patient).count() == 0


def test_iso_time_is_kept(appointments):
    appointment = appointments.book(name="Iso", age=30, appointment_time="2031-03-04T09:15:00")

    scheduled = appointment.appointment_time.replace(tzinfo=None)
    assert scheduled == datetime(2031, 3, 4, 9, 15)


def test_status_moves_forward(appointments):
    appointment = appointments.book(name="Flow", age=30)

    assert appointments.update_status(appointment.id, "in-progress").status == "in-progress"
    assert appointments.update_status(appointment.id, "completed").status == "completed"


def test_waiting_can_be_completed_directly(appointments):
    appointment = appointments.book(name="Quick", age=30)

    assert appointments.update_status(appointment.id, "completed").status == "completed"


def test_same_status_is_a_no_op(appointments):
    appointment = appointments.book(name="Same", age=30)

    assert appointments.update_status(appointment.id, "waiting").status == "waiting"


def test_status_cannot_move_backwards(appointments):
    appointment = appointments.book(name="Back", age=30)
    appointments.update_status(appointment.id, "completed")

    with pytest.raises(StatusTransitionError):
        appointments.update_status(appointment.id, "waiting")


def test_unknown_status_is_rejected(appointments):
    appointment = appointments.book(name="Odd", age=30)

    with pytest.raises(ValidationError):
        appointments.update_status(appointment.id, "cancelled")


def test_unknown_appointment(appointments):
    with pytest.raises(AppointmentUpdateError):
        appointments.update_status(404, "completed")


def test_queue_projections(appointments):
    waiting = appointments.book(name="Wait", age=30)
    seeing = appointments.book(name="Seeing", age=30)
    done = appointments.book(name="Done", age=30)
    long_ago = appointments.book(
        name="Long ago",
        age=30,
        appointment_time=datetime.now(timezone.utc) - timedelta(days=3),
    )
    appointments.update_status(seeing.id, "in-progress")
    appointments.update_status(done.id, "completed")
    appointments.update_status(long_ago.id, "completed")

    assert [a.id for a in appointments.waiting()] == [waiting.id]
    assert [a.id for a in appointments.in_progress()] == [seeing.id]
    assert [a.id for a in appointments.completed_today()] == [done.id]
    assert [a.queue_number for a in appointments.list_appointments()] == [1, 2, 3, 4]


def test_today_counts_every_status_but_not_other_days(appointments):
    waiting = appointments.book(name="Now", age=30)
    done = appointments.book(name="Done", age=30)
    appointments.book(
        name="Next week",
        age=30,
        appointment_time=datetime.now(timezone.utc) + timedelta(days=7),
    )
    appointments.update_status(done.id, "completed")

    assert sorted(a.id for a in appointments.today()) == [waiting.id, done.id]
