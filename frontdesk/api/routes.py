from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.orm import Session

from frontdesk.api.deps import STAFF_ROLES, current_role, get_app_settings, require_roles
from frontdesk.core.config import AppConfig
from frontdesk.core.errors import FrontDeskError, NotFoundError, StoreWriteError, ValidationError
from frontdesk.schemas import (
    AdmissionBoard,
    AdmissionRead,
    AdmitPatientPayload,
    AppointmentRead,
    AppointmentStatusPayload,
    BedBoard,
    BedCreate,
    BedRead,
    BookAppointmentPayload,
    BookForPatientPayload,
    DashboardSummary,
    DischargeResponse,
    InventoryItemCreate,
    InventoryItemRead,
    InventoryReport,
    PatientCreate,
    PatientRead,
    QueueSnapshot,
    SessionInfo,
    StockUpdatePayload,
)
from frontdesk.services.admissions import AdmissionWorkflow, DischargeResult
from frontdesk.services.appointments import AppointmentService
from frontdesk.services.beds import BedService
from frontdesk.services.dashboard import summarize
from frontdesk.services.db import get_db
from frontdesk.services.inventory import InventoryService
from frontdesk.services.patients import PatientService

router = APIRouter()

staff_only = Depends(require_roles(*STAFF_ROLES))


def _status_for(exc: FrontDeskError) -> int:
    if isinstance(exc, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, StoreWriteError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


def _failure(exc: FrontDeskError, *, operation: str) -> JSONResponse:
    logger.warning(
        "{operation} failed at '{step}': {error} partial={partial}",
        operation=operation,
        step=exc.step,
        error=exc.message,
        partial=exc.partial,
    )
    return JSONResponse(status_code=_status_for(exc), content=exc.to_dict())


def _discharge_response(result: DischargeResult, *, operation: str) -> JSONResponse | DischargeResponse:
    body = DischargeResponse(
        status="discharged" if result.ok else "partial",
        admission=AdmissionRead.model_validate(result.admission) if result.admission else None,
        bed=BedRead.model_validate(result.bed) if result.bed else None,
        errors=[error.to_dict() for error in result.errors],
    )
    if result.ok:
        return body
    for error in result.errors:
        logger.warning("{operation}: {message}", operation=operation, message=error.describe())
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=body.model_dump(mode="json"))


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/session", response_model=SessionInfo)
def session_info(role: str = Depends(current_role), settings: AppConfig = Depends(get_app_settings)):
    return SessionInfo(role=role, override_allowed=settings.allow_role_override)


@router.get("/dashboard", response_model=DashboardSummary)
def dashboard(session: Session = Depends(get_db), settings: AppConfig = Depends(get_app_settings)):
    return summarize(session, settings)


# Patients


@router.get("/patients", response_model=list[PatientRead], dependencies=[staff_only])
def list_patients(session: Session = Depends(get_db)):
    return PatientService(session=session).list_patients()


@router.post("/patients", response_model=PatientRead, status_code=status.HTTP_201_CREATED, dependencies=[staff_only])
def register_patient(payload: PatientCreate, session: Session = Depends(get_db)):
    try:
        return PatientService(session=session).register(name=payload.name, age=payload.age, phone=payload.phone)
    except FrontDeskError as exc:
        return _failure(exc, operation="register_patient")


# OPD queue


@router.get("/appointments", response_model=list[AppointmentRead])
def list_appointments(session: Session = Depends(get_db), settings: AppConfig = Depends(get_app_settings)):
    return AppointmentService(session=session, settings=settings).list_appointments()


@router.get("/appointments/queue", response_model=QueueSnapshot)
def queue_snapshot(session: Session = Depends(get_db), settings: AppConfig = Depends(get_app_settings)):
    service = AppointmentService(session=session, settings=settings)
    return QueueSnapshot(
        waiting=service.waiting(),
        in_progress=service.in_progress(),
        completed_today=service.completed_today(),
        today_appointments=len(service.today()),
        next_queue_number=service.next_queue_number(),
    )


@router.post("/appointments", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
def book_appointment(
    payload: BookAppointmentPayload,
    session: Session = Depends(get_db),
    settings: AppConfig = Depends(get_app_settings),
):
    service = AppointmentService(session=session, settings=settings)
    try:
        return service.book(
            name=payload.name,
            age=payload.age,
            phone=payload.phone,
            appointment_time=payload.appointment_time,
        )
    except FrontDeskError as exc:
        return _failure(exc, operation="book_appointment")


@router.post(
    "/patients/{patient_id}/appointments",
    response_model=AppointmentRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[staff_only],
)
def book_for_patient(
    patient_id: int,
    payload: BookForPatientPayload,
    session: Session = Depends(get_db),
    settings: AppConfig = Depends(get_app_settings),
):
    service = AppointmentService(session=session, settings=settings)
    try:
        return service.book_for_patient(patient_id=patient_id, appointment_time=payload.appointment_time)
    except FrontDeskError as exc:
        return _failure(exc, operation="book_for_patient")


@router.patch("/appointments/{appointment_id}/status", response_model=AppointmentRead, dependencies=[staff_only])
def update_appointment_status(
    appointment_id: int,
    payload: AppointmentStatusPayload,
    session: Session = Depends(get_db),
    settings: AppConfig = Depends(get_app_settings),
):
    try:
        return AppointmentService(session=session, settings=settings).update_status(appointment_id, payload.status)
    except FrontDeskError as exc:
        return _failure(exc, operation="update_appointment_status")


# Beds


@router.get("/beds", response_model=BedBoard)
def list_beds(session: Session = Depends(get_db)):
    beds = BedService(session=session).list_beds()
    available = sum(1 for bed in beds if bed.status == "available")
    return BedBoard(beds=beds, available=available, occupied=len(beds) - available)


@router.get("/beds/{bed_id}", response_model=BedRead)
def get_bed(bed_id: int, session: Session = Depends(get_db)):
    bed = BedService(session=session).get(bed_id)
    if bed is None:
        return _failure(NotFoundError(f"no beds row with id {bed_id}", step="look up bed"), operation="get_bed")
    return bed


@router.post("/beds", response_model=BedRead, status_code=status.HTTP_201_CREATED, dependencies=[staff_only])
def add_bed(payload: BedCreate, session: Session = Depends(get_db)):
    try:
        return BedService(session=session).add_bed(bed_number=payload.bed_number, ward=payload.ward)
    except FrontDeskError as exc:
        return _failure(exc, operation="add_bed")


@router.post("/beds/{bed_id}/discharge", response_model=DischargeResponse, dependencies=[staff_only])
def discharge_bed(bed_id: int, session: Session = Depends(get_db), settings: AppConfig = Depends(get_app_settings)):
    result = AdmissionWorkflow(session=session, settings=settings).discharge_bed(bed_id)
    return _discharge_response(result, operation="discharge_bed")


# Admissions


@router.get("/admissions", response_model=AdmissionBoard)
def list_admissions(session: Session = Depends(get_db), settings: AppConfig = Depends(get_app_settings)):
    workflow = AdmissionWorkflow(session=session, settings=settings)
    return AdmissionBoard(current=workflow.current_admissions(), recent_discharges=workflow.recent_discharges())


@router.post("/admissions", response_model=AdmissionRead, status_code=status.HTTP_201_CREATED, dependencies=[staff_only])
def admit_patient(
    payload: AdmitPatientPayload,
    session: Session = Depends(get_db),
    settings: AppConfig = Depends(get_app_settings),
):
    workflow = AdmissionWorkflow(session=session, settings=settings)
    try:
        return workflow.admit_patient(**payload.model_dump())
    except FrontDeskError as exc:
        return _failure(exc, operation="admit_patient")


@router.post("/admissions/{admission_id}/discharge", response_model=DischargeResponse, dependencies=[staff_only])
def discharge_admission(
    admission_id: int,
    session: Session = Depends(get_db),
    settings: AppConfig = Depends(get_app_settings),
):
    result = AdmissionWorkflow(session=session, settings=settings).discharge_admission(admission_id)
    return _discharge_response(result, operation="discharge_admission")


# Inventory


@router.get("/inventory", response_model=InventoryReport)
def inventory_report(session: Session = Depends(get_db), settings: AppConfig = Depends(get_app_settings)):
    service = InventoryService(session=session, settings=settings)
    items = service.list_items()
    return InventoryReport(
        items=items,
        low_stock=service.low_stock(),
        expiring_soon=service.expiring_soon(),
        total_units=sum(item.stock for item in items),
    )


@router.post(
    "/inventory",
    response_model=InventoryItemRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[staff_only],
)
def add_inventory_item(
    payload: InventoryItemCreate,
    session: Session = Depends(get_db),
    settings: AppConfig = Depends(get_app_settings),
):
    try:
        return InventoryService(session=session, settings=settings).add_item(**payload.model_dump())
    except FrontDeskError as exc:
        return _failure(exc, operation="add_inventory_item")


@router.patch("/inventory/{item_id}/stock", response_model=InventoryItemRead, dependencies=[staff_only])
def update_stock(
    item_id: int,
    payload: StockUpdatePayload,
    session: Session = Depends(get_db),
    settings: AppConfig = Depends(get_app_settings),
):
    try:
        return InventoryService(session=session, settings=settings).update_stock(item_id, payload.stock)
    except FrontDeskError as exc:
        return _failure(exc, operation="update_stock")
