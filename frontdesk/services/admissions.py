from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy.orm import Session

from frontdesk.core.config import AppConfig, get_settings
from frontdesk.core.errors import (
    AdmissionCreateError,
    AdmissionUpdateError,
    BedUpdateError,
    FrontDeskError,
    require,
)
from frontdesk.models.admission import ADMITTED, DISCHARGED, Admission
from frontdesk.models.bed import Bed
from frontdesk.services.beds import BedService
from frontdesk.services.patients import PatientService, validate_demographics
from frontdesk.services.store import StoreError, TableStore
from frontdesk.utils.time import utcnow


@dataclass
class DischargeResult:
    admission: Admission | None = None
    bed: Bed | None = None
    errors: list[FrontDeskError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class AdmissionWorkflow:
    """Admit and discharge inpatients.

    Admission is three separate writes: patient, admission record, bed. Each commits on
    its own and nothing is undone when a later one fails; the raised error says which
    step failed and its ``partial`` mapping lists the rows that were already written.

    Discharge is two independent writes (admission, bed). Both are always attempted and
    both are no-ops when their row is already in the discharged/available state.
    """

    def __init__(
        self,
        *,
        session: Session,
        patient_service: PatientService | None = None,
        bed_service: BedService | None = None,
        settings: AppConfig | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.patient_service = patient_service or PatientService(session=session)
        self.bed_service = bed_service or BedService(session=session)
        self.store: TableStore[Admission] = TableStore(session, Admission)

    def admit_patient(
        self,
        *,
        bed_id: int,
        name: str | None = None,
        age: int | None = None,
        phone: str | None = None,
        opd_reference: str | None = None,
        patient_id: int | None = None,
    ) -> Admission:
        require(bed_id is not None, "a bed must be selected")
        if patient_id is None:
            validate_demographics(name, age)

        patient = self.patient_service.resolve_or_register(patient_id=patient_id, name=name, age=age, phone=phone)

        try:
            admission = self.store.insert(
                patient_id=patient.id,
                patient_name=patient.name,
                bed_id=bed_id,
                admission_date=utcnow(),
                opd_reference=(opd_reference or "").strip() or None,
                status=ADMITTED,
            )
        except StoreError as exc:
            logger.warning(
                "Admission record rejected; patient id={patient_id} was kept",
                patient_id=patient.id,
            )
            raise AdmissionCreateError(str(exc), partial={"patient_id": patient.id}) from exc

        try:
            self.bed_service.occupy(bed_id, patient.id)
        except BedUpdateError as exc:
            exc.partial.update({"patient_id": patient.id, "admission_id": admission.id})
            logger.warning(
                "Bed id={bed_id} not occupied; admission id={admission_id} and patient id={patient_id} were kept",
                bed_id=bed_id,
                admission_id=admission.id,
                patient_id=patient.id,
            )
            raise

        logger.info(
            "Admitted {name} (patient id={patient_id}) to bed id={bed_id}",
            name=patient.name,
            patient_id=patient.id,
            bed_id=bed_id,
        )
        return admission

    def list_admissions(self) -> list[Admission]:
        return self.store.all(Admission.admission_date.desc(), Admission.id.desc())

    def current_admissions(self) -> list[Admission]:
        return self.store.query(
            Admission.status == ADMITTED,
            order_by=[Admission.admission_date.desc(), Admission.id.desc()],
        )

    def recent_discharges(self, limit: int | None = None) -> list[Admission]:
        return self.store.query(
            Admission.status == DISCHARGED,
            order_by=[Admission.admission_date.desc(), Admission.id.desc()],
            limit=limit if limit is not None else self.settings.recent_discharge_limit,
        )

    def find_admitted(self, *, patient_id: int, bed_id: int) -> Admission | None:
        matches = self.store.query(
            Admission.patient_id == patient_id,
            Admission.bed_id == bed_id,
            Admission.status == ADMITTED,
            limit=1,
        )
        return matches[0] if matches else None

    def discharge(self, *, patient_id: int, bed_id: int) -> DischargeResult:
        result = DischargeResult()
        try:
            admission = self.find_admitted(patient_id=patient_id, bed_id=bed_id)
        except StoreError as exc:
            result.errors.append(AdmissionUpdateError(str(exc)))
        else:
            if admission is not None:
                self._mark_discharged(admission, result)
            else:
                logger.debug("No admitted record for patient id={patient_id} in bed id={bed_id}", patient_id=patient_id, bed_id=bed_id)

        self._free_bed(bed_id, patient_id, result)
        return result

    def discharge_admission(self, admission_id: int) -> DischargeResult:
        result = DischargeResult()
        try:
            admission = self.store.get(admission_id)
        except StoreError as exc:
            result.errors.append(AdmissionUpdateError(str(exc)))
            return result
        if admission is None:
            result.errors.append(AdmissionUpdateError(f"no admissions row with id {admission_id}"))
            return result
        if admission.status == DISCHARGED:
            # the bed may already belong to a later admission, even one for this same patient
            logger.debug("Admission id={admission_id} already discharged", admission_id=admission_id)
            result.admission = admission
            try:
                result.bed = self.bed_service.get(admission.bed_id)
            except StoreError as exc:
                result.errors.append(BedUpdateError(str(exc), step="free bed"))
            return result

        self._mark_discharged(admission, result)
        self._free_bed(admission.bed_id, admission.patient_id, result)
        return result

    def discharge_bed(self, bed_id: int) -> DischargeResult:
        try:
            bed = self.bed_service.get(bed_id)
        except StoreError as exc:
            return DischargeResult(errors=[BedUpdateError(str(exc), step="free bed")])
        if bed is None:
            return DischargeResult(errors=[BedUpdateError(f"no beds row with id {bed_id}", step="free bed")])
        if bed.patient_id is None:
            return DischargeResult(bed=bed)
        return self.discharge(patient_id=bed.patient_id, bed_id=bed_id)

    def _mark_discharged(self, admission: Admission, result: DischargeResult) -> None:
        if admission.status == DISCHARGED:
            result.admission = admission
            return
        try:
            result.admission = self.store.update(admission.id, status=DISCHARGED, discharge_date=utcnow())
        except StoreError as exc:
            logger.warning("Discharge of admission id={admission_id} failed: {error}", admission_id=admission.id, error=exc)
            result.errors.append(AdmissionUpdateError(str(exc), partial={"admission_id": admission.id}))
            return
        logger.info("Discharged admission id={admission_id}", admission_id=admission.id)

    def _free_bed(self, bed_id: int, patient_id: int | None, result: DischargeResult) -> None:
        try:
            result.bed = self.bed_service.release(bed_id, patient_id=patient_id)
        except BedUpdateError as exc:
            if result.admission is not None:
                exc.partial.setdefault("admission_id", result.admission.id)
            result.errors.append(exc)


def get_admission_workflow(session: Session) -> AdmissionWorkflow:
    return AdmissionWorkflow(session=session)
