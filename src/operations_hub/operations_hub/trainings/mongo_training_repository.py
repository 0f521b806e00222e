from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import utcnow
from ..common.listing import ListQuery, Page
from ..database.bootstrap import TRAININGS_COLLECTION
from ..database.connection import DatabaseConnection
from ..database.mongo_base import AFTER, fetch_page, group_counts, to_object_id
from .model import LISTING, TrainingSession
from .repository import TrainingRepository


class MongoTrainingRepository(TrainingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @property
    def _sessions(self):
        return self._conn_factory.collection(TRAININGS_COLLECTION)

    def list(self, query: ListQuery) -> Page[TrainingSession]:
        docs, total = fetch_page(
            self._sessions,
            LISTING.mongo_filter(query),
            sort=LISTING.sort,
            skip=query.skip,
            limit=query.limit,
        )
        return Page(
            items=[TrainingSession.from_document(d) for d in docs], total=total, page=query.page, limit=query.limit
        )

    def get_by_id(self, session_id: str) -> Optional[TrainingSession]:
        oid = to_object_id(session_id)
        if oid is None:
            return None
        doc = self._sessions.find_one({"_id": oid})
        return TrainingSession.from_document(doc) if doc else None

    def count(self) -> int:
        return self._sessions.count_documents({})

    def count_by(self, field: str) -> list[dict]:
        return group_counts(self._sessions, field)

    def create(self, fields: dict) -> TrainingSession:
        now = utcnow()
        doc = dict(fields, createdAt=now, updatedAt=now)
        doc.setdefault("feedback", [])
        inserted = self._sessions.insert_one(doc)
        doc["_id"] = inserted.inserted_id
        return TrainingSession.from_document(doc)

    def _find_and_update(self, session_id: str, update: dict) -> Optional[TrainingSession]:
        oid = to_object_id(session_id)
        if oid is None:
            return None
        update.setdefault("$set", {})["updatedAt"] = utcnow()
        doc = self._sessions.find_one_and_update({"_id": oid}, update, return_document=AFTER)
        return TrainingSession.from_document(doc) if doc else None

    def update(self, session_id: str, fields: dict) -> Optional[TrainingSession]:
        return self._find_and_update(session_id, {"$set": dict(fields)})

    def delete_by_id(self, session_id: str) -> bool:
        oid = to_object_id(session_id)
        if oid is None:
            return False
        return self._sessions.delete_one({"_id": oid}).deleted_count > 0

    def push_feedback(self, session_id: str, feedback: dict) -> Optional[TrainingSession]:
        return self._find_and_update(session_id, {"$push": {"feedback": feedback}})
