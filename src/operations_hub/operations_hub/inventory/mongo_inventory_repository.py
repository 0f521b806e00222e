from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import utcnow
from ..common.listing import ListQuery, Page
from ..database.bootstrap import INVENTORY_COLLECTION
from ..database.connection import DatabaseConnection
from ..database.mongo_base import AFTER, fetch_page, to_object_id, translate_duplicate_key
from .model import LISTING, InventoryItem
from .repository import InventoryRepository

DUPLICATE_SKU = "SKU already exists"


class MongoInventoryRepository(InventoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @property
    def _items(self):
        return self._conn_factory.collection(INVENTORY_COLLECTION)

    def list(self, query: ListQuery) -> Page[InventoryItem]:
        docs, total = fetch_page(
            self._items,
            LISTING.mongo_filter(query),
            sort=LISTING.sort,
            skip=query.skip,
            limit=query.limit,
        )
        return Page(items=[InventoryItem.from_document(d) for d in docs], total=total, page=query.page, limit=query.limit)

    def list_all(self) -> Sequence[InventoryItem]:
        return [InventoryItem.from_document(d) for d in self._items.find({}).sort("createdAt", -1)]

    def list_low_stock(self) -> Sequence[InventoryItem]:
        cursor = self._items.find({"$expr": {"$lte": ["$quantity", "$reorderLevel"]}}).sort("quantity", 1)
        return [InventoryItem.from_document(d) for d in cursor]

    def get_by_id(self, item_id: str) -> Optional[InventoryItem]:
        oid = to_object_id(item_id)
        if oid is None:
            return None
        doc = self._items.find_one({"_id": oid})
        return InventoryItem.from_document(doc) if doc else None

    def create(self, fields: dict) -> InventoryItem:
        now = utcnow()
        doc = dict(fields, createdAt=now, updatedAt=now)
        with translate_duplicate_key(DUPLICATE_SKU):
            inserted = self._items.insert_one(doc)
        doc["_id"] = inserted.inserted_id
        return InventoryItem.from_document(doc)

    def update(self, item_id: str, fields: dict) -> Optional[InventoryItem]:
        oid = to_object_id(item_id)
        if oid is None:
            return None
        with translate_duplicate_key(DUPLICATE_SKU):
            doc = self._items.find_one_and_update(
                {"_id": oid},
                {"$set": dict(fields, updatedAt=utcnow())},
                return_document=AFTER,
            )
        return InventoryItem.from_document(doc) if doc else None

    def delete_by_id(self, item_id: str) -> bool:
        oid = to_object_id(item_id)
        if oid is None:
            return False
        return self._items.delete_one({"_id": oid}).deleted_count > 0

    def adjust_quantity(self, item_id: str, *, delta: float, entry: dict) -> Optional[InventoryItem]:
        oid = to_object_id(item_id)
        if oid is None:
            return None
        doc = self._items.find_one_and_update(
            {"_id": oid, "quantity": {"$gte": -delta}},
            {
                "$inc": {"quantity": delta},
                "$push": {"changeHistory": entry},
                "$set": {"updatedAt": utcnow()},
            },
            return_document=AFTER,
        )
        return InventoryItem.from_document(doc) if doc else None
