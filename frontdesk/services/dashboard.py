from __future__ import annotations

from sqlalchemy.orm import Session

from frontdesk.core.config import AppConfig, get_settings
from frontdesk.schemas.dashboard import DashboardSummary
from frontdesk.services.admissions import AdmissionWorkflow
from frontdesk.services.appointments import AppointmentService
from frontdesk.services.beds import BedService
from frontdesk.services.inventory import InventoryService
from frontdesk.services.patients import PatientService


def summarize(session: Session, settings: AppConfig | None = None) -> DashboardSummary:
    settings = settings or get_settings()
    patients = PatientService(session=session)
    appointments = AppointmentService(session=session, patient_service=patients, settings=settings)
    low_stock = InventoryService(session=session, settings=settings).low_stock()
    return DashboardSummary(
        total_patients=patients.count(),
        available_beds=len(BedService(session=session).available_beds()),
        waiting_queue=len(appointments.waiting()),
        today_appointments=len(appointments.today()),
        current_admissions=len(
            AdmissionWorkflow(session=session, patient_service=patients, settings=settings).current_admissions()
        ),
        low_stock_count=len(low_stock),
        low_stock_items=[item.name for item in low_stock],
    )
