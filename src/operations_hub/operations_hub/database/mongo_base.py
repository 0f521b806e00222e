from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from ..core.exceptions import DuplicateKeyError

AFTER = ReturnDocument.AFTER


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse a path id; malformed ids behave like ids that match nothing."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def new_object_id() -> ObjectId:
    return ObjectId()


@contextmanager
def translate_duplicate_key(message: str) -> Iterator[None]:
    try:
        yield
    except MongoDuplicateKeyError as e:
        raise DuplicateKeyError(message) from e


def fetch_page(
    collection: Collection,
    query: dict,
    *,
    sort: Sequence[tuple[str, int]],
    skip: int,
    limit: int,
) -> tuple[list[dict], int]:
    """One page of documents plus the total over the same (unpaginated) filter."""
    docs = list(collection.find(query).sort(list(sort)).skip(skip).limit(limit))
    total = collection.count_documents(query)
    return docs, total


def group_counts(collection: Collection, field: str, *, match: Optional[dict] = None) -> list[dict]:
    pipeline: list[dict] = []
    if match:
        pipeline.append({"$match": match})
    pipeline.append({"$group": {"_id": f"${field}", "count": {"$sum": 1}}})
    return [{"_id": row["_id"], "count": int(row["count"])} for row in collection.aggregate(pipeline)]


def assign_subdocument_ids(items: list[dict]) -> list[dict]:
    """Give embedded array entries their own ObjectId, keeping ids already present."""
    out = []
    for item in items:
        item = dict(item)
        oid = to_object_id(item.get("_id"))
        item["_id"] = oid or new_object_id()
        out.append(item)
    return out
