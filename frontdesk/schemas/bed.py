from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class BedCreate(BaseModel):
    bed_number: str = Field(..., min_length=1)
    ward: str = Field(..., min_length=1)


class BedRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bed_number: str
    ward: str
    status: Literal["available", "occupied"]
    patient_id: int | None = None
    updated_at: datetime


class BedBoard(BaseModel):
    beds: list[BedRead]
    available: int
    occupied: int
