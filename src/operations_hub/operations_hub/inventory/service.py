from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import utcnow
from ..common.listing import ListQuery, Page
from ..common.validators import optional_text, require_non_empty, require_number
from ..core.exceptions import NotFoundError, ValidationError
from .model import LISTING, InventoryItem, validate_inventory_fields
from .repository import InventoryRepository

logger = logging.getLogger(__name__)

ITEM_NOT_FOUND = "Item not found"


class InventoryService:
    """Use cases: stock catalogue, stock movements and stock statistics."""

    def __init__(self, items: InventoryRepository, *, clock: Callable[[], datetime] = utcnow):
        self._items = items
        self._clock = clock

    def list_items(self, query: ListQuery) -> Page[InventoryItem]:
        return self._items.list(LISTING.validate(query))

    def get_item(self, item_id: str) -> InventoryItem:
        item = self._items.get_by_id(item_id)
        if not item:
            raise NotFoundError(ITEM_NOT_FOUND)
        return item

    def create_item(self, payload: Mapping[str, Any]) -> InventoryItem:
        fields = validate_inventory_fields(payload)
        item = self._items.create(fields)
        logger.info("Inventory item %s created (%s)", item.sku, item.item_id)
        return item

    def update_item(self, item_id: str, payload: Mapping[str, Any]) -> InventoryItem:
        fields = validate_inventory_fields(payload, partial=True)
        if not fields:
            return self.get_item(item_id)
        item = self._items.update(item_id, fields)
        if not item:
            raise NotFoundError(ITEM_NOT_FOUND)
        return item

    def delete_item(self, item_id: str) -> None:
        if not self._items.delete_by_id(item_id):
            raise NotFoundError(ITEM_NOT_FOUND)

    def low_stock_items(self) -> Sequence[InventoryItem]:
        return self._items.list_low_stock()

    def adjust_stock(self, item_id: str, *, delta: Any, user: Any, change: Optional[str] = None) -> InventoryItem:
        amount = require_number(delta, "Quantity change")
        if amount == 0:
            raise ValidationError("Quantity change cannot be zero")
        who = require_non_empty(user, "User")

        item = self.get_item(item_id)
        if item.quantity + amount < 0:
            raise ValidationError(f"Insufficient stock: only {item.quantity:g} left")

        verb = "Added" if amount > 0 else "Removed"
        entry = {
            "date": self._clock().strftime("%Y-%m-%d"),
            "change": optional_text(change) or f"{verb} {abs(amount):g} unit(s)",
            "user": who,
            "quantity": amount,
        }
        updated = self._items.adjust_quantity(item_id, delta=amount, entry=entry)
        if not updated:
            # Stock moved between the read above and the guarded update.
            raise ValidationError("Insufficient stock")
        return updated

    def statistics(self) -> dict:
        items = self._items.list_all()

        by_department: dict[str, dict] = {}
        for item in items:
            row = by_department.setdefault(
                item.department, {"_id": item.department, "count": 0, "totalValue": 0}
            )
            row["count"] += 1
            row["totalValue"] += item.stock_value

        return {
            "totalItems": len(items),
            "lowStockItems": sum(1 for i in items if i.is_low_stock),
            "totalValue": sum(i.stock_value for i in items),
            "itemsByDepartment": sorted(by_department.values(), key=lambda r: r["count"], reverse=True),
        }
