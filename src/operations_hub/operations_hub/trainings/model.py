from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..attachments.model import Attachment
from ..common.datetime_utils import isoformat, parse_datetime
from ..common.listing import ListingSpec
from ..common.validators import optional_text, require_choice, require_non_empty, require_number, string_list
from ..core.constants import DEFAULT_MAX_ATTENDEES
from ..core.enums import TrainingStatus, TrainingType

LISTING = ListingSpec(
    equality={"department": None, "status": TrainingStatus},
    search_fields=("title", "description", "trainer", "supervisor", "site"),
    sort=(("date", -1), ("createdAt", -1)),
)

INVALID_TRAINING_DATE = "Invalid date format. Please use YYYY-MM-DD"

RATING_MIN = 1
RATING_MAX = 5


@dataclass(frozen=True)
class Feedback:
    employee_id: str
    employee_name: str
    rating: int
    comment: Optional[str] = None
    submitted_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Feedback":
        return cls(
            employee_id=doc.get("employeeId") or "",
            employee_name=doc.get("employeeName") or "",
            rating=int(doc.get("rating") or 0),
            comment=doc.get("comment"),
            submitted_at=parse_datetime(doc.get("submittedAt")),
        )

    def to_json(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "rating": self.rating,
            "comment": self.comment,
            "submittedAt": isoformat(self.submitted_at),
        }


@dataclass(frozen=True)
class TrainingSession:
    session_id: str
    display_id: str
    title: str
    trainer: str
    site: str
    department: str
    date: Optional[datetime]
    type: TrainingType = TrainingType.SAFETY
    status: TrainingStatus = TrainingStatus.SCHEDULED
    description: Optional[str] = None
    time: Optional[str] = None
    duration: Optional[str] = None
    supervisor: Optional[str] = None
    location: Optional[str] = None
    attendees: tuple[str, ...] = field(default_factory=tuple)
    max_attendees: int = DEFAULT_MAX_ATTENDEES
    objectives: tuple[str, ...] = field(default_factory=tuple)
    attachments: tuple[Attachment, ...] = field(default_factory=tuple)
    feedback: tuple[Feedback, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def average_rating(self) -> Optional[float]:
        if not self.feedback:
            return None
        return round(sum(f.rating for f in self.feedback) / len(self.feedback), 1)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "TrainingSession":
        return cls(
            session_id=str(doc["_id"]),
            display_id=doc.get("id") or "",
            title=doc.get("title") or "",
            trainer=doc.get("trainer") or "",
            site=doc.get("site") or "",
            department=doc.get("department") or "",
            date=parse_datetime(doc.get("date")),
            type=TrainingType(doc.get("type") or TrainingType.SAFETY.value),
            status=TrainingStatus(doc.get("status") or TrainingStatus.SCHEDULED.value),
            description=doc.get("description"),
            time=doc.get("time"),
            duration=doc.get("duration"),
            supervisor=doc.get("supervisor"),
            location=doc.get("location"),
            attendees=tuple(doc.get("attendees") or ()),
            max_attendees=int(doc.get("maxAttendees") or DEFAULT_MAX_ATTENDEES),
            objectives=tuple(doc.get("objectives") or ()),
            attachments=tuple(Attachment.from_document(a) for a in doc.get("attachments") or ()),
            feedback=tuple(Feedback.from_document(f) for f in doc.get("feedback") or ()),
            created_at=parse_datetime(doc.get("createdAt")),
            updated_at=parse_datetime(doc.get("updatedAt")),
        )

    def to_json(self) -> dict:
        return {
            "_id": self.session_id,
            "id": self.display_id,
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "date": isoformat(self.date),
            "time": self.time,
            "duration": self.duration,
            "trainer": self.trainer,
            "supervisor": self.supervisor,
            "site": self.site,
            "department": self.department,
            "location": self.location,
            "attendees": list(self.attendees),
            "maxAttendees": self.max_attendees,
            "status": self.status.value,
            "objectives": list(self.objectives),
            "attachments": [a.to_json() for a in self.attachments],
            "feedback": [f.to_json() for f in self.feedback],
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


def validate_training_fields(payload: Mapping[str, Any], *, partial: bool = False) -> dict:
    """Training fields other than ``date``, ``status`` and the embedded arrays."""

    def wanted(key: str) -> bool:
        return not partial or key in payload

    fields: dict[str, Any] = {}
    for key, label in (("title", "Title"), ("trainer", "Trainer"), ("site", "Site"), ("department", "Department")):
        if wanted(key):
            fields[key] = require_non_empty(payload.get(key), label)
    for key in ("description", "time", "duration", "supervisor", "location"):
        if wanted(key):
            fields[key] = optional_text(payload.get(key))
    if wanted("type"):
        fields["type"] = require_choice(payload.get("type"), TrainingType, "Type", default=TrainingType.SAFETY).value
    if wanted("attendees"):
        fields["attendees"] = string_list(payload.get("attendees"), "Attendees")
    if wanted("objectives"):
        fields["objectives"] = string_list(payload.get("objectives"), "Objectives")
    if wanted("maxAttendees"):
        fields["maxAttendees"] = require_number(
            payload.get("maxAttendees"), "Max attendees", minimum=1, integer=True, default=DEFAULT_MAX_ATTENDEES
        )
    return fields


def validate_feedback(payload: Mapping[str, Any]) -> dict:
    return {
        "employeeId": require_non_empty(payload.get("employeeId"), "Employee ID"),
        "employeeName": require_non_empty(payload.get("employeeName"), "Employee name"),
        "rating": require_number(payload.get("rating"), "Rating", minimum=RATING_MIN, maximum=RATING_MAX, integer=True),
        "comment": optional_text(payload.get("comment")),
    }
