from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .bed import BedRead
from .patient import normalize_phone


class AdmitPatientPayload(BaseModel):
    bed_id: int
    patient_id: int | None = None
    name: str | None = None
    age: int | None = Field(default=None, ge=0)
    phone: str | None = None
    opd_reference: str | None = None

    @field_validator("phone")
    @classmethod
    def _normalize_phone(cls, value: str | None) -> str | None:
        return normalize_phone(value)

    @model_validator(mode="after")
    def _patient_or_demographics(self) -> "AdmitPatientPayload":
        if self.patient_id is None and (not self.name or not self.name.strip() or self.age is None):
            raise ValueError("name and age are required unless patient_id is given")
        return self


class AdmissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    patient_name: str
    bed_id: int
    admission_date: datetime
    discharge_date: datetime | None = None
    opd_reference: str | None = None
    status: Literal["admitted", "discharged"]


class AdmissionBoard(BaseModel):
    current: list[AdmissionRead]
    recent_discharges: list[AdmissionRead]


class DischargeResponse(BaseModel):
    status: str
    admission: AdmissionRead | None = None
    bed: BedRead | None = None
    errors: list[dict[str, Any]] = Field(default_factory=list)
