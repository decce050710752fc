from __future__ import annotations

from datetime import date, timedelta

from loguru import logger
from sqlalchemy.orm import Session

from frontdesk.core.config import AppConfig, get_settings
from frontdesk.core.errors import InventoryCreateError, InventoryUpdateError, require
from frontdesk.models.inventory import InventoryItem
from frontdesk.services.store import StoreError, TableStore
from frontdesk.utils.time import local_today, utcnow


class InventoryService:
    def __init__(self, session: Session, settings: AppConfig | None = None) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.store: TableStore[InventoryItem] = TableStore(session, InventoryItem)

    def list_items(self) -> list[InventoryItem]:
        return self.store.all(InventoryItem.name, InventoryItem.id)

    def add_item(self, *, name: str, stock: int, expiry_date: date, unit: str) -> InventoryItem:
        require(name and name.strip(), "item name is required")
        require(unit and unit.strip(), "unit is required")
        require(expiry_date is not None, "expiry date is required")
        require(stock is not None and stock >= 0, "stock must be zero or more")
        try:
            item = self.store.insert(
                name=name.strip(),
                stock=stock,
                expiry_date=expiry_date,
                unit=unit.strip(),
                updated_at=utcnow(),
            )
        except StoreError as exc:
            raise InventoryCreateError(str(exc)) from exc
        logger.info("Added inventory item {name} ({stock} {unit})", name=item.name, stock=item.stock, unit=item.unit)
        return item

    def update_stock(self, item_id: int, stock: int) -> InventoryItem:
        """Overwrite the stock level; this is not an increment."""
        require(stock is not None and stock >= 0, "stock must be zero or more")
        try:
            item = self.store.update(item_id, stock=stock, updated_at=utcnow())
        except StoreError as exc:
            raise InventoryUpdateError(str(exc)) from exc
        logger.info("Stock for {name} set to {stock}", name=item.name, stock=stock)
        return item

    def low_stock(self) -> list[InventoryItem]:
        threshold = self.settings.low_stock_threshold
        return [item for item in self.list_items() if item.stock < threshold]

    def expiring_soon(self, today: date | None = None) -> list[InventoryItem]:
        today = today or local_today(self.settings.timezone)
        cutoff = today + timedelta(days=self.settings.expiry_window_days)
        return [item for item in self.list_items() if item.expiry_date <= cutoff]

    def total_units(self) -> int:
        return sum(item.stock for item in self.list_items())


def get_inventory_service(session: Session) -> InventoryService:
    return InventoryService(session=session)
