from .patient import PatientCreate, PatientRead
from .appointment import (
    AppointmentRead,
    AppointmentStatusPayload,
    BookAppointmentPayload,
    BookForPatientPayload,
    QueueSnapshot,
)
from .bed import BedBoard, BedCreate, BedRead
from .admission import AdmissionBoard, AdmissionRead, AdmitPatientPayload, DischargeResponse
from .inventory import InventoryItemCreate, InventoryItemRead, InventoryReport, StockUpdatePayload
from .dashboard import DashboardSummary, SessionInfo

__all__ = [
    "PatientCreate",
    "PatientRead",
    "AppointmentRead",
    "AppointmentStatusPayload",
    "BookAppointmentPayload",
    "BookForPatientPayload",
    "QueueSnapshot",
    "BedBoard",
    "BedCreate",
    "BedRead",
    "AdmissionBoard",
    "AdmissionRead",
    "AdmitPatientPayload",
    "DischargeResponse",
    "InventoryItemCreate",
    "InventoryItemRead",
    "InventoryReport",
    "StockUpdatePayload",
    "DashboardSummary",
    "SessionInfo",
]
