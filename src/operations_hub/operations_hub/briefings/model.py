from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..attachments.model import Attachment
from ..common.datetime_utils import isoformat, parse_datetime, require_datetime
from ..common.listing import ListingSpec
from ..common.validators import optional_text, require_choice, require_non_empty, require_number, string_list
from ..core.enums import ActionItemStatus, BriefingShift, Priority
from ..core.exceptions import ValidationError

LISTING = ListingSpec(
    equality={"department": None, "shift": BriefingShift},
    search_fields=("conductedBy", "site", "topics", "keyPoints"),
    sort=(("date", -1), ("createdAt", -1)),
)

INVALID_BRIEFING_DATE = "Invalid briefing date format. Please use YYYY-MM-DD"


@dataclass(frozen=True)
class ActionItem:
    item_id: str
    description: str
    assigned_to: str
    due_date: Optional[datetime]
    status: ActionItemStatus = ActionItemStatus.PENDING
    priority: Priority = Priority.MEDIUM

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ActionItem":
        return cls(
            item_id=str(doc.get("_id") or ""),
            description=doc.get("description") or "",
            assigned_to=doc.get("assignedTo") or "",
            due_date=parse_datetime(doc.get("dueDate")),
            status=ActionItemStatus(doc.get("status") or ActionItemStatus.PENDING.value),
            priority=Priority(doc.get("priority") or Priority.MEDIUM.value),
        )

    def to_json(self) -> dict:
        return {
            "_id": self.item_id,
            "description": self.description,
            "assignedTo": self.assigned_to,
            "dueDate": isoformat(self.due_date),
            "status": self.status.value,
            "priority": self.priority.value,
        }


@dataclass(frozen=True)
class StaffBriefing:
    """Domain entity: a recorded shift briefing with its follow-up actions."""

    briefing_id: str
    display_id: str
    date: Optional[datetime]
    time: Optional[str]
    conducted_by: str
    site: str
    department: str
    attendees_count: int = 0
    topics: tuple[str, ...] = field(default_factory=tuple)
    key_points: tuple[str, ...] = field(default_factory=tuple)
    action_items: tuple[ActionItem, ...] = field(default_factory=tuple)
    attachments: tuple[Attachment, ...] = field(default_factory=tuple)
    notes: Optional[str] = None
    shift: BriefingShift = BriefingShift.MORNING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def pending_actions(self) -> int:
        return sum(1 for a in self.action_items if a.status is ActionItemStatus.PENDING)

    def action_item(self, item_id: str) -> Optional[ActionItem]:
        for item in self.action_items:
            if item.item_id == item_id:
                return item
        return None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "StaffBriefing":
        return cls(
            briefing_id=str(doc["_id"]),
            display_id=doc.get("id") or "",
            date=parse_datetime(doc.get("date")),
            time=doc.get("time"),
            conducted_by=doc.get("conductedBy") or "",
            site=doc.get("site") or "",
            department=doc.get("department") or "",
            attendees_count=int(doc.get("attendeesCount") or 0),
            topics=tuple(doc.get("topics") or ()),
            key_points=tuple(doc.get("keyPoints") or ()),
            action_items=tuple(ActionItem.from_document(a) for a in doc.get("actionItems") or ()),
            attachments=tuple(Attachment.from_document(a) for a in doc.get("attachments") or ()),
            notes=doc.get("notes"),
            shift=BriefingShift(doc.get("shift") or BriefingShift.MORNING.value),
            created_at=parse_datetime(doc.get("createdAt")),
            updated_at=parse_datetime(doc.get("updatedAt")),
        )

    def to_json(self) -> dict:
        return {
            "_id": self.briefing_id,
            "id": self.display_id,
            "date": isoformat(self.date),
            "time": self.time,
            "conductedBy": self.conducted_by,
            "site": self.site,
            "department": self.department,
            "attendeesCount": self.attendees_count,
            "topics": list(self.topics),
            "keyPoints": list(self.key_points),
            "actionItems": [a.to_json() for a in self.action_items],
            "attachments": [a.to_json() for a in self.attachments],
            "notes": self.notes,
            "shift": self.shift.value,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


def parse_action_items(values: Any) -> list[dict]:
    """Coerce action items to documents; an unparsable due date rejects the whole list."""
    if values is None:
        return []
    if not isinstance(values, Iterable) or isinstance(values, (str, dict)):
        raise ValidationError("Action items must be a list")

    items = []
    for raw in values:
        if not isinstance(raw, Mapping):
            raise ValidationError("Action items must be objects")
        due = raw.get("dueDate")
        due_date = require_datetime(due, f"Invalid action item date format: {due}")
        item = {
            "description": require_non_empty(raw.get("description"), "Action item description"),
            "assignedTo": require_non_empty(raw.get("assignedTo"), "Action item assignee"),
            "dueDate": due_date,
            "status": require_choice(
                raw.get("status"), ActionItemStatus, "Action item status", default=ActionItemStatus.PENDING
            ).value,
            "priority": require_choice(raw.get("priority"), Priority, "Action item priority", default=Priority.MEDIUM).value,
        }
        if raw.get("_id"):
            item["_id"] = raw["_id"]
        items.append(item)
    return items


def validate_briefing_fields(payload: Mapping[str, Any], *, partial: bool = False) -> dict:
    """Plain briefing fields; ``date`` and ``actionItems`` are coerced separately."""

    def wanted(key: str) -> bool:
        return not partial or key in payload

    fields: dict[str, Any] = {}
    for key, label in (("conductedBy", "Conducted By"), ("site", "Site"), ("department", "Department")):
        if wanted(key):
            fields[key] = require_non_empty(payload.get(key), label)
    if wanted("time"):
        fields["time"] = optional_text(payload.get("time"))
    if wanted("attendeesCount"):
        fields["attendeesCount"] = require_number(
            payload.get("attendeesCount"), "Attendees count", minimum=0, integer=True, default=0
        )
    if wanted("topics"):
        fields["topics"] = string_list(payload.get("topics"), "Topics")
    if wanted("keyPoints"):
        fields["keyPoints"] = string_list(payload.get("keyPoints"), "Key points")
    if wanted("notes"):
        fields["notes"] = optional_text(payload.get("notes"))
    if wanted("shift"):
        fields["shift"] = require_choice(payload.get("shift"), BriefingShift, "Shift", default=BriefingShift.MORNING).value
    return fields
