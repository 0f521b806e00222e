from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import isoformat, parse_datetime
from ..core.enums import AttachmentType


def attachment_type_for(mimetype: str) -> AttachmentType:
    mimetype = (mimetype or "").lower()
    if mimetype.startswith("image/"):
        return AttachmentType.IMAGE
    if mimetype.startswith("video/"):
        return AttachmentType.VIDEO
    return AttachmentType.DOCUMENT


def format_size_mb(num_bytes: int) -> str:
    return f"{num_bytes / (1024 * 1024):.1f} MB"


@dataclass(frozen=True)
class Attachment:
    """Embedded descriptor of a stored asset (no identity outside its parent)."""

    name: str
    type: AttachmentType
    url: str
    size: str
    uploaded_at: Optional[datetime]

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Attachment":
        return cls(
            name=doc.get("name") or "",
            type=AttachmentType(doc.get("type") or AttachmentType.DOCUMENT.value),
            url=doc.get("url") or "",
            size=doc.get("size") or "",
            uploaded_at=parse_datetime(doc.get("uploadedAt")),
        )

    def to_document(self) -> dict:
        return {
            "name": self.name,
            "type": self.type.value,
            "url": self.url,
            "size": self.size,
            "uploadedAt": self.uploaded_at,
        }

    def to_json(self) -> dict:
        doc = self.to_document()
        doc["uploadedAt"] = isoformat(self.uploaded_at)
        return doc
