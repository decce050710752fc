from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class DashboardSummary(BaseModel):
    total_patients: int
    available_beds: int
    waiting_queue: int
    today_appointments: int
    current_admissions: int
    low_stock_count: int
    low_stock_items: list[str] = Field(default_factory=list)


class SessionInfo(BaseModel):
    role: Literal["admin", "staff", "patient"]
    override_allowed: bool
