from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

ADMITTED = "admitted"
DISCHARGED = "discharged"


class Admission(Base):
    __tablename__ = "admissions"
    __table_args__ = (
        CheckConstraint("status IN ('admitted', 'discharged')", name="status_known"),
        CheckConstraint(
            "(status = 'discharged' AND discharge_date IS NOT NULL) "
            "OR (status = 'admitted' AND discharge_date IS NULL)",
            name="discharge_date_matches_status",
        ),
        Index(
            "uq_admissions_one_admitted_per_patient_bed",
            "patient_id",
            "bed_id",
            unique=True,
            sqlite_where=text("status = 'admitted'"),
            postgresql_where=text("status = 'admitted'"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id"), nullable=False)
    patient_name: Mapped[str] = mapped_column(String(128), nullable=False)
    # Not a foreign key: the bed is checked when it is occupied, not when the admission is written
    bed_id: Mapped[int] = mapped_column(Integer, nullable=False)
    admission_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    discharge_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    opd_reference: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ADMITTED)
