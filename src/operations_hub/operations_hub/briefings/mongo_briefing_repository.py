from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import utcnow
from ..common.listing import ListQuery, Page
from ..core.enums import ActionItemStatus
from ..database.bootstrap import BRIEFINGS_COLLECTION
from ..database.connection import DatabaseConnection
from ..database.mongo_base import AFTER, assign_subdocument_ids, fetch_page, group_counts, to_object_id
from .model import LISTING, StaffBriefing
from .repository import BriefingRepository


class MongoBriefingRepository(BriefingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @property
    def _briefings(self):
        return self._conn_factory.collection(BRIEFINGS_COLLECTION)

    def list(self, query: ListQuery) -> Page[StaffBriefing]:
        docs, total = fetch_page(
            self._briefings,
            LISTING.mongo_filter(query),
            sort=LISTING.sort,
            skip=query.skip,
            limit=query.limit,
        )
        return Page(
            items=[StaffBriefing.from_document(d) for d in docs], total=total, page=query.page, limit=query.limit
        )

    def get_by_id(self, briefing_id: str) -> Optional[StaffBriefing]:
        oid = to_object_id(briefing_id)
        if oid is None:
            return None
        doc = self._briefings.find_one({"_id": oid})
        return StaffBriefing.from_document(doc) if doc else None

    def count(self) -> int:
        return self._briefings.count_documents({})

    def count_by(self, field: str) -> list[dict]:
        return group_counts(self._briefings, field)

    def count_pending_actions(self) -> int:
        rows = list(
            self._briefings.aggregate(
                [
                    {"$unwind": "$actionItems"},
                    {"$match": {"actionItems.status": ActionItemStatus.PENDING.value}},
                    {"$group": {"_id": None, "count": {"$sum": 1}}},
                ]
            )
        )
        return int(rows[0]["count"]) if rows else 0

    def create(self, fields: dict) -> StaffBriefing:
        now = utcnow()
        doc = dict(fields, createdAt=now, updatedAt=now)
        doc["actionItems"] = assign_subdocument_ids(doc.get("actionItems") or [])
        inserted = self._briefings.insert_one(doc)
        doc["_id"] = inserted.inserted_id
        return StaffBriefing.from_document(doc)

    def update(self, briefing_id: str, fields: dict) -> Optional[StaffBriefing]:
        oid = to_object_id(briefing_id)
        if oid is None:
            return None
        changes = dict(fields, updatedAt=utcnow())
        if "actionItems" in changes:
            changes["actionItems"] = assign_subdocument_ids(changes["actionItems"])
        doc = self._briefings.find_one_and_update({"_id": oid}, {"$set": changes}, return_document=AFTER)
        return StaffBriefing.from_document(doc) if doc else None

    def delete_by_id(self, briefing_id: str) -> bool:
        oid = to_object_id(briefing_id)
        if oid is None:
            return False
        return self._briefings.delete_one({"_id": oid}).deleted_count > 0

    def set_action_item_status(self, briefing_id: str, item_id: str, status: str) -> Optional[StaffBriefing]:
        oid = to_object_id(briefing_id)
        item_oid = to_object_id(item_id)
        if oid is None or item_oid is None:
            return None
        doc = self._briefings.find_one_and_update(
            {"_id": oid, "actionItems._id": item_oid},
            {"$set": {"actionItems.$[item].status": status, "updatedAt": utcnow()}},
            array_filters=[{"item._id": item_oid}],
            return_document=AFTER,
        )
        return StaffBriefing.from_document(doc) if doc else None
