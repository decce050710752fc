from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .patient import PatientCreate

AppointmentStatus = Literal["waiting", "in-progress", "completed"]


class BookAppointmentPayload(PatientCreate):
    appointment_time: str | None = Field(default=None, description="ISO timestamp or phrase like 'today 3pm'")


class BookForPatientPayload(BaseModel):
    appointment_time: str | None = None


class AppointmentStatusPayload(BaseModel):
    status: AppointmentStatus


class AppointmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int | None = None
    patient_name: str
    appointment_time: datetime
    status: AppointmentStatus
    queue_number: int
    created_at: datetime


class QueueSnapshot(BaseModel):
    waiting: list[AppointmentRead]
    in_progress: list[AppointmentRead]
    completed_today: list[AppointmentRead]
    today_appointments: int
    next_queue_number: int
