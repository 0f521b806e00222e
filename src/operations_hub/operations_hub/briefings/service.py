from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..attachments.uploader import AttachmentUploader, UploadedFile
from ..common.datetime_utils import require_datetime
from ..common.display_ids import next_display_id
from ..common.listing import ListQuery, Page
from ..core.constants import BRIEFING_ATTACHMENT_FOLDER, BRIEFING_ID_PREFIX
from ..core.enums import ActionItemStatus, BriefingShift
from ..core.exceptions import NotFoundError, ValidationError
from .model import INVALID_BRIEFING_DATE, LISTING, StaffBriefing, parse_action_items, validate_briefing_fields
from .repository import BriefingRepository

logger = logging.getLogger(__name__)

BRIEFING_NOT_FOUND = "Staff briefing not found"


class BriefingService:
    """Use cases: record staff briefings, track their action items."""

    def __init__(self, briefings: BriefingRepository, uploader: AttachmentUploader):
        self._briefings = briefings
        self._uploader = uploader

    def list_briefings(self, query: ListQuery) -> Page[StaffBriefing]:
        return self._briefings.list(LISTING.validate(query))

    def get_briefing(self, briefing_id: str) -> StaffBriefing:
        briefing = self._briefings.get_by_id(briefing_id)
        if not briefing:
            raise NotFoundError(BRIEFING_NOT_FOUND)
        return briefing

    def create_briefing(self, payload: Mapping[str, Any], files: Sequence[UploadedFile] = ()) -> StaffBriefing:
        """Upload attachments, coerce dates, validate, then insert.

        Uploads run first, so a payload rejected afterwards may leave stored
        assets that no briefing references.
        """
        attachments = self._uploader.upload_all(files, folder=BRIEFING_ATTACHMENT_FOLDER)
        action_items = parse_action_items(payload.get("actionItems"))
        date = require_datetime(payload.get("date"), INVALID_BRIEFING_DATE)

        if not payload.get("conductedBy") or not payload.get("site"):
            raise ValidationError("Conducted By and Site are required fields")
        fields = validate_briefing_fields(payload)

        fields.update(
            date=date,
            actionItems=action_items,
            attachments=[a.to_document() for a in attachments],
            id=next_display_id(BRIEFING_ID_PREFIX, self._briefings.count()),
        )
        briefing = self._briefings.create(fields)
        logger.info(
            "Briefing %s created (%s) with %d attachment(s)",
            briefing.display_id,
            briefing.briefing_id,
            len(briefing.attachments),
        )
        return briefing

    def update_briefing(self, briefing_id: str, payload: Mapping[str, Any]) -> StaffBriefing:
        fields = validate_briefing_fields(payload, partial=True)
        if payload.get("date"):
            fields["date"] = require_datetime(payload["date"], INVALID_BRIEFING_DATE)
        if "actionItems" in payload:
            fields["actionItems"] = parse_action_items(payload["actionItems"])
        if not fields:
            return self.get_briefing(briefing_id)

        briefing = self._briefings.update(briefing_id, fields)
        if not briefing:
            raise NotFoundError(BRIEFING_NOT_FOUND)
        return briefing

    def delete_briefing(self, briefing_id: str) -> None:
        if not self._briefings.delete_by_id(briefing_id):
            raise NotFoundError(BRIEFING_NOT_FOUND)

    def update_action_item_status(self, briefing_id: str, item_id: str, status: Any) -> StaffBriefing:
        try:
            new_status = ActionItemStatus(status)
        except ValueError:
            raise ValidationError("Invalid status value")

        briefing = self._briefings.set_action_item_status(briefing_id, item_id, new_status.value)
        if not briefing:
            raise NotFoundError("Staff briefing or action item not found")
        return briefing

    def statistics(self) -> dict:
        by_shift = {row["_id"]: row["count"] for row in self._briefings.count_by("shift")}
        return {
            "totalBriefings": self._briefings.count(),
            "morningBriefings": by_shift.get(BriefingShift.MORNING.value, 0),
            "eveningBriefings": by_shift.get(BriefingShift.EVENING.value, 0),
            "nightBriefings": by_shift.get(BriefingShift.NIGHT.value, 0),
            "briefingsByDepartment": self._briefings.count_by("department"),
            "pendingActions": self._briefings.count_pending_actions(),
        }
