from __future__ import annotations

from loguru import logger
from sqlalchemy.orm import Session

from frontdesk.core.errors import BedCreateError, BedUpdateError, require
from frontdesk.models.bed import AVAILABLE, OCCUPIED, Bed
from frontdesk.services.store import StoreError, TableStore
from frontdesk.utils.time import utcnow


class BedService:
    """Two-state bed lifecycle: available <-> occupied.

    ``occupy`` is only called by the admission workflow and ``release`` by discharge.
    Releasing a bed that is already available is a no-op.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.store: TableStore[Bed] = TableStore(session, Bed)

    def list_beds(self) -> list[Bed]:
        return self.store.all(Bed.bed_number)

    def available_beds(self) -> list[Bed]:
        return self.store.query(Bed.status == AVAILABLE, order_by=[Bed.bed_number])

    def occupied_beds(self) -> list[Bed]:
        return self.store.query(Bed.status == OCCUPIED, order_by=[Bed.bed_number])

    def get(self, bed_id: int) -> Bed | None:
        return self.store.get(bed_id)

    def add_bed(self, *, bed_number: str, ward: str) -> Bed:
        require(bed_number and bed_number.strip(), "bed number is required")
        require(ward and ward.strip(), "ward is required")
        try:
            bed = self.store.insert(
                bed_number=bed_number.strip(),
                ward=ward.strip(),
                status=AVAILABLE,
                patient_id=None,
                updated_at=utcnow(),
            )
        except StoreError as exc:
            raise BedCreateError(str(exc)) from exc
        logger.info("Added bed {bed_number} in {ward}", bed_number=bed.bed_number, ward=bed.ward)
        return bed

    def occupy(self, bed_id: int, patient_id: int) -> Bed:
        require(patient_id is not None, "an occupied bed needs a patient")
        try:
            bed = self.store.get(bed_id)
        except StoreError as exc:
            raise BedUpdateError(str(exc), step="occupy bed") from exc
        if bed is None:
            raise BedUpdateError(f"no beds row with id {bed_id}", step="occupy bed")
        if bed.status == OCCUPIED:
            if bed.patient_id == patient_id:
                return bed
            raise BedUpdateError(
                f"bed {bed.bed_number} is already occupied by patient {bed.patient_id}",
                step="occupy bed",
            )

        try:
            bed = self.store.update(bed_id, status=OCCUPIED, patient_id=patient_id, updated_at=utcnow())
        except StoreError as exc:
            raise BedUpdateError(str(exc), step="occupy bed") from exc
        logger.info("Bed {bed_number} occupied by patient id={patient_id}", bed_number=bed.bed_number, patient_id=patient_id)
        return bed

    def release(self, bed_id: int, *, patient_id: int | None = None) -> Bed:
        """Free a bed. With ``patient_id`` the bed is only freed while that patient holds it."""
        try:
            bed = self.store.get(bed_id)
        except StoreError as exc:
            raise BedUpdateError(str(exc), step="free bed") from exc
        if bed is None:
            raise BedUpdateError(f"no beds row with id {bed_id}", step="free bed")
        if bed.status == AVAILABLE:
            logger.debug("Bed {bed_number} already available", bed_number=bed.bed_number)
            return bed
        if patient_id is not None and bed.patient_id != patient_id:
            logger.warning(
                "Bed {bed_number} now holds patient id={holder}, not id={patient_id}; leaving it occupied",
                bed_number=bed.bed_number,
                holder=bed.patient_id,
                patient_id=patient_id,
            )
            return bed

        try:
            bed = self.store.update(bed_id, status=AVAILABLE, patient_id=None, updated_at=utcnow())
        except StoreError as exc:
            raise BedUpdateError(str(exc), step="free bed") from exc
        logger.info("Bed {bed_number} is available again", bed_number=bed.bed_number)
        return bed


def get_bed_service(session: Session) -> BedService:
    return BedService(session=session)
