from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from frontdesk.utils.time import utcnow

from .base import Base

AVAILABLE = "available"
OCCUPIED = "occupied"


class Bed(Base):
    __tablename__ = "beds"
    __table_args__ = (
        CheckConstraint("status IN ('available', 'occupied')", name="status_known"),
        CheckConstraint(
            "(status = 'occupied' AND patient_id IS NOT NULL) "
            "OR (status = 'available' AND patient_id IS NULL)",
            name="occupant_matches_status",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    bed_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    ward: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=AVAILABLE)
    patient_id: Mapped[int | None] = mapped_column(ForeignKey("patients.id"), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
