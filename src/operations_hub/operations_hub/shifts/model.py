from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import clock_minutes, isoformat, parse_datetime
from ..common.listing import ListingSpec
from ..common.validators import require_clock_time, require_length, require_non_empty, string_list
from ..core.constants import SHORT_ID_LENGTH
from ..core.exceptions import ValidationError

LISTING = ListingSpec(equality={}, search_fields=("name", "employees"))

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50


@dataclass(frozen=True)
class Shift:
    """Domain entity: a named daily time window with assigned employees."""

    shift_id: str
    name: str
    start_time: str
    end_time: str
    employees: tuple[str, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def short_id(self) -> str:
        return self.shift_id[-SHORT_ID_LENGTH:]

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Shift":
        return cls(
            shift_id=str(doc["_id"]),
            name=doc.get("name") or "",
            start_time=doc.get("startTime") or "",
            end_time=doc.get("endTime") or "",
            employees=tuple(doc.get("employees") or ()),
            created_at=parse_datetime(doc.get("createdAt")),
            updated_at=parse_datetime(doc.get("updatedAt")),
        )

    def to_json(self) -> dict:
        return {
            "_id": self.shift_id,
            "id": self.short_id,
            "name": self.name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "employees": list(self.employees),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


def normalize_employees(values: Iterable[Any]) -> list[str]:
    """Trimmed employee ids, duplicates dropped, first occurrence kept."""
    seen: dict[str, None] = {}
    for employee_id in string_list(values, "Employees"):
        seen.setdefault(employee_id, None)
    return list(seen)


def check_time_window(start_time: str, end_time: str) -> None:
    # Both times are read as clock times on the same nominal day.
    if clock_minutes(end_time) <= clock_minutes(start_time):
        raise ValidationError("End time must be after start time")


def validate_shift_fields(payload: Mapping[str, Any], *, partial: bool = False) -> dict:
    def wanted(key: str) -> bool:
        return not partial or key in payload

    fields: dict[str, Any] = {}
    if wanted("name"):
        name = require_non_empty(payload.get("name"), "Shift name")
        fields["name"] = require_length(name, "Shift name", min_len=NAME_MIN_LENGTH, max_len=NAME_MAX_LENGTH)
    if wanted("startTime"):
        fields["startTime"] = require_clock_time(payload.get("startTime"), "Start time")
    if wanted("endTime"):
        fields["endTime"] = require_clock_time(payload.get("endTime"), "End time")
    if wanted("employees"):
        fields["employees"] = normalize_employees(payload.get("employees"))
    return fields
