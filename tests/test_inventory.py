from __future__ import annotations

from datetime import date, timedelta

import pytest

from frontdesk.core.errors import InventoryUpdateError, ValidationError


def _add(inventory, name, stock, expiry=None):
    return inventory.add_item(
        name=name,
        stock=stock,
        expiry_date=expiry or date.today() + timedelta(days=365),
        unit="tablets",
    )


def test_stock_update_overwrites(inventory):
    item = _add(inventory, "Paracetamol", 100)

    inventory.update_stock(item.id, 40)
    updated = inventory.update_stock(item.id, 7)

    assert updated.stock == 7


def test_negative_stock_is_rejected(inventory):
    item = _add(inventory, "Ibuprofen", 10)

    with pytest.raises(ValidationError):
        inventory.update_stock(item.id, -1)

    assert inventory.list_items()[0].stock == 10


def test_unknown_item(inventory):
    with pytest.raises(InventoryUpdateError) as excinfo:
        inventory.update_stock(31337, 5)

    assert "31337" in excinfo.value.describe()


def test_add_item_validation(inventory):
    with pytest.raises(ValidationError):
        inventory.add_item(name="", stock=1, expiry_date=date.today(), unit="ml")
    with pytest.raises(ValidationError):
        inventory.add_item(name="Saline", stock=-5, expiry_date=date.today(), unit="ml")


def test_low_stock_uses_threshold(inventory):
    _add(inventory, "Plenty", 10)
    _add(inventory, "Scarce", 9)
    _add(inventory, "Empty", 0)

    assert sorted(item.name for item in inventory.low_stock()) == ["Empty", "Scarce"]


def test_expiring_soon_window(inventory):
    today = date(2030, 6, 1)
    _add(inventory, "Expired", 50, today - timedelta(days=2))
    _add(inventory, "Edge", 50, today + timedelta(days=30))
    _add(inventory, "Later", 50, today + timedelta(days=31))

    assert sorted(item.name for item in inventory.expiring_soon(today=today)) == ["Edge", "Expired"]


def test_total_units(inventory):
    _add(inventory, "A", 3)
    _add(inventory, "B", 4)

    assert inventory.total_units() == 7
