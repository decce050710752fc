from __future__ import annotations

from typing import Any


class FrontDeskError(Exception):
    """Base for every failure a front-desk operation can report.

    ``step`` names the operation that failed in operator terms, ``message`` is the
    underlying reason (usually the store's own message) and ``partial`` records the
    ids of rows that earlier steps of the same workflow already wrote.
    """

    kind = "front_desk_error"
    step = "front desk operation"

    def __init__(self, message: str, *, partial: dict[str, Any] | None = None, step: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.partial: dict[str, Any] = dict(partial or {})
        if step:
            self.step = step

    def describe(self) -> str:
        return f"Failed to {self.step}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "error",
            "error": self.kind,
            "step": self.step,
            "message": self.describe(),
            "partial": self.partial,
        }


class ValidationError(FrontDeskError):
    kind = "validation_error"
    step = "validate input"

    def describe(self) -> str:
        return f"Invalid input: {self.message}"


class StatusTransitionError(ValidationError):
    kind = "status_transition_error"
    step = "change appointment status"


class NotFoundError(FrontDeskError):
    kind = "not_found"
    step = "look up record"


class StoreWriteError(FrontDeskError):
    """A store write the workflow depended on was rejected."""


class PatientCreateError(StoreWriteError):
    kind = "patient_create_error"
    step = "create patient record"


class AppointmentCreateError(StoreWriteError):
    kind = "appointment_create_error"
    step = "book appointment"


class AppointmentUpdateError(StoreWriteError):
    kind = "appointment_update_error"
    step = "update appointment status"


class BedCreateError(StoreWriteError):
    kind = "bed_create_error"
    step = "add bed"


class BedUpdateError(StoreWriteError):
    kind = "bed_update_error"
    step = "update bed"


class AdmissionCreateError(StoreWriteError):
    kind = "admission_create_error"
    step = "create admission record"


class AdmissionUpdateError(StoreWriteError):
    kind = "admission_update_error"
    step = "discharge admission"


class InventoryCreateError(StoreWriteError):
    kind = "inventory_create_error"
    step = "add inventory item"


class InventoryUpdateError(StoreWriteError):
    kind = "inventory_update_error"
    step = "update stock"


def require(condition: Any, message: str) -> None:
    if not condition:
        raise ValidationError(message)
