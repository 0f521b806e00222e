"""Listing filters shared by every resource.

``ListQuery`` is the closed set of query-string keys the API recognises.
Each resource declares a ``ListingSpec`` naming which of those keys it
filters on, which text fields ``search`` scans and how results are sorted.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Mapping, Optional, Sequence, Type, TypeVar

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.exceptions import ValidationError

T = TypeVar("T")

FILTER_KEYS = ("department", "status", "shift", "category", "site")
ALL = "all"


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


@dataclass(frozen=True)
class ListQuery:
    department: Optional[str] = None
    status: Optional[str] = None
    shift: Optional[str] = None
    category: Optional[str] = None
    site: Optional[str] = None
    search: str = ""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT

    @classmethod
    def from_args(cls, args: Mapping[str, Any], *, default_limit: int = DEFAULT_PAGE_LIMIT) -> "ListQuery":
        filters = {}
        for key in FILTER_KEYS:
            value = (args.get(key) or "").strip()
            filters[key] = value if value and value != ALL else None
        return cls(
            search=(args.get("search") or "").strip(),
            page=_positive_int(args.get("page"), DEFAULT_PAGE),
            limit=min(_positive_int(args.get("limit"), default_limit), MAX_PAGE_LIMIT),
            **filters,
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def filter_value(self, key: str) -> Optional[str]:
        value = getattr(self, key)
        if value is None or value == ALL:
            return None
        return value


@dataclass(frozen=True)
class ListingSpec:
    """Which filters a resource honours, what ``search`` scans, fixed sort order."""

    equality: Mapping[str, Optional[Type[Enum]]]
    search_fields: Sequence[str]
    sort: Sequence[tuple[str, int]] = field(default_factory=lambda: (("createdAt", -1),))

    def validate(self, query: ListQuery) -> ListQuery:
        for key, enum_cls in self.equality.items():
            value = query.filter_value(key)
            if value is None or enum_cls is None:
                continue
            try:
                enum_cls(value)
            except ValueError:
                raise ValidationError(f"Invalid {key} filter: {value}")
        return query

    def mongo_filter(self, query: ListQuery) -> dict:
        filt: dict[str, Any] = {}
        for key in self.equality:
            value = query.filter_value(key)
            if value is not None:
                filt[key] = value
        if query.search:
            pattern = re.escape(query.search)
            filt["$or"] = [{name: {"$regex": pattern, "$options": "i"}} for name in self.search_fields]
        return filt

    def matches(self, document: Mapping[str, Any], query: ListQuery) -> bool:
        """Pure-Python counterpart of ``mongo_filter`` for in-memory stores."""
        for key in self.equality:
            value = query.filter_value(key)
            if value is not None and document.get(key) != value:
                return False
        if not query.search:
            return True

        needle = query.search.lower()
        for name in self.search_fields:
            candidate = document.get(name)
            values = candidate if isinstance(candidate, (list, tuple)) else [candidate]
            if any(isinstance(v, str) and needle in v.lower() for v in values):
                return True
        return False


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0
