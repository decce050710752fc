from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class InventoryItemCreate(BaseModel):
    name: str = Field(..., min_length=1)
    stock: int = Field(..., ge=0)
    expiry_date: date
    unit: str = Field(..., min_length=1)


class StockUpdatePayload(BaseModel):
    stock: int = Field(..., ge=0)


class InventoryItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    stock: int
    expiry_date: date
    unit: str
    updated_at: datetime


class InventoryReport(BaseModel):
    items: list[InventoryItemRead]
    low_stock: list[InventoryItemRead]
    expiring_soon: list[InventoryItemRead]
    total_units: int
