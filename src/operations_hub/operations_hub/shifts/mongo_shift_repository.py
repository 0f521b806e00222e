from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import utcnow
from ..common.listing import ListQuery, Page
from ..database.bootstrap import SHIFTS_COLLECTION
from ..database.connection import DatabaseConnection
from ..database.mongo_base import AFTER, fetch_page, to_object_id
from .model import LISTING, Shift
from .repository import ShiftRepository


class MongoShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @property
    def _shifts(self):
        return self._conn_factory.collection(SHIFTS_COLLECTION)

    def list(self, query: ListQuery) -> Page[Shift]:
        docs, total = fetch_page(
            self._shifts,
            LISTING.mongo_filter(query),
            sort=LISTING.sort,
            skip=query.skip,
            limit=query.limit,
        )
        return Page(items=[Shift.from_document(d) for d in docs], total=total, page=query.page, limit=query.limit)

    def list_all(self) -> Sequence[Shift]:
        return [Shift.from_document(d) for d in self._shifts.find({}).sort("createdAt", -1)]

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        oid = to_object_id(shift_id)
        if oid is None:
            return None
        doc = self._shifts.find_one({"_id": oid})
        return Shift.from_document(doc) if doc else None

    def create(self, fields: dict) -> Shift:
        now = utcnow()
        doc = dict(fields, createdAt=now, updatedAt=now)
        doc.setdefault("employees", [])
        inserted = self._shifts.insert_one(doc)
        doc["_id"] = inserted.inserted_id
        return Shift.from_document(doc)

    def _find_and_update(self, shift_id: str, update: dict) -> Optional[Shift]:
        oid = to_object_id(shift_id)
        if oid is None:
            return None
        update.setdefault("$set", {})["updatedAt"] = utcnow()
        doc = self._shifts.find_one_and_update({"_id": oid}, update, return_document=AFTER)
        return Shift.from_document(doc) if doc else None

    def update(self, shift_id: str, fields: dict) -> Optional[Shift]:
        return self._find_and_update(shift_id, {"$set": dict(fields)})

    def delete_by_id(self, shift_id: str) -> bool:
        oid = to_object_id(shift_id)
        if oid is None:
            return False
        return self._shifts.delete_one({"_id": oid}).deleted_count > 0

    def add_employee(self, shift_id: str, employee_id: str) -> Optional[Shift]:
        return self._find_and_update(shift_id, {"$addToSet": {"employees": employee_id}})

    def remove_employee(self, shift_id: str, employee_id: str) -> Optional[Shift]:
        return self._find_and_update(shift_id, {"$pull": {"employees": employee_id}})
