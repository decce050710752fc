from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from frontdesk.utils.time import utcnow

from .base import Base

WAITING = "waiting"
IN_PROGRESS = "in-progress"
COMPLETED = "completed"

# Forward-only progression; the index is the rank of each status
APPOINTMENT_STATUSES = (WAITING, IN_PROGRESS, COMPLETED)


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        CheckConstraint(
            "status IN ('waiting', 'in-progress', 'completed')",
            name="status_known",
        ),
        CheckConstraint("queue_number > 0", name="queue_number_positive"),
        Index("ix_appointments_status_queue_number", "status", "queue_number"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    patient_id: Mapped[int | None] = mapped_column(ForeignKey("patients.id"), nullable=True)
    patient_name: Mapped[str] = mapped_column(String(128), nullable=False)
    appointment_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=WAITING)
    queue_number: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
