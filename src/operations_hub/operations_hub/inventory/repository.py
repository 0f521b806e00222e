from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.listing import ListQuery, Page
from .model import InventoryItem


class InventoryRepository(Protocol):
    """Repository interface for inventory items.

    Note: ``create``/``update`` raise DuplicateKeyError when the sku is taken.
    """

    def list(self, query: ListQuery) -> Page[InventoryItem]:
        raise NotImplementedError

    def list_all(self) -> Sequence[InventoryItem]:
        raise NotImplementedError

    def list_low_stock(self) -> Sequence[InventoryItem]:
        raise NotImplementedError

    def get_by_id(self, item_id: str) -> Optional[InventoryItem]:
        raise NotImplementedError

    def create(self, fields: dict) -> InventoryItem:
        raise NotImplementedError

    def update(self, item_id: str, fields: dict) -> Optional[InventoryItem]:
        raise NotImplementedError

    def delete_by_id(self, item_id: str) -> bool:
        raise NotImplementedError

    def adjust_quantity(self, item_id: str, *, delta: float, entry: dict) -> Optional[InventoryItem]:
        """Apply ``delta`` and append ``entry``; ``None`` if missing or stock would go negative."""
        raise NotImplementedError
