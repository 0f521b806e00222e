from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Sequence

from ..attachments.uploader import AttachmentUploader, UploadedFile
from ..common.datetime_utils import require_datetime, utcnow
from ..common.display_ids import next_display_id
from ..common.listing import ListQuery, Page
from ..core.constants import TRAINING_ATTACHMENT_FOLDER, TRAINING_ID_PREFIX
from ..core.enums import TrainingStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import INVALID_TRAINING_DATE, LISTING, TrainingSession, validate_feedback, validate_training_fields
from .repository import TrainingRepository

logger = logging.getLogger(__name__)

TRAINING_NOT_FOUND = "Training session not found"


class TrainingService:
    def __init__(
        self,
        sessions: TrainingRepository,
        uploader: AttachmentUploader,
        *,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._sessions = sessions
        self._uploader = uploader
        self._clock = clock

    def list_trainings(self, query: ListQuery) -> Page[TrainingSession]:
        return self._sessions.list(LISTING.validate(query))

    def get_training(self, session_id: str) -> TrainingSession:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError(TRAINING_NOT_FOUND)
        return session

    def create_training(self, payload: Mapping[str, Any], files: Sequence[UploadedFile] = ()) -> TrainingSession:
        attachments = self._uploader.upload_all(files, folder=TRAINING_ATTACHMENT_FOLDER)
        date = require_datetime(payload.get("date"), INVALID_TRAINING_DATE)

        if not payload.get("title") or not payload.get("trainer"):
            raise ValidationError("Title and trainer are required fields")
        fields = validate_training_fields(payload)

        # New sessions always start scheduled, whatever the payload says.
        fields.update(
            date=date,
            status=TrainingStatus.SCHEDULED.value,
            attachments=[a.to_document() for a in attachments],
            feedback=[],
            id=next_display_id(TRAINING_ID_PREFIX, self._sessions.count()),
        )
        session = self._sessions.create(fields)
        logger.info(
            "Training %s created (%s) with %d attachment(s)",
            session.display_id,
            session.session_id,
            len(session.attachments),
        )
        return session

    def update_training(self, session_id: str, payload: Mapping[str, Any]) -> TrainingSession:
        fields = validate_training_fields(payload, partial=True)
        if payload.get("date"):
            fields["date"] = require_datetime(payload["date"], INVALID_TRAINING_DATE)
        if "status" in payload:
            fields["status"] = self._parse_status(payload.get("status")).value
        if not fields:
            return self.get_training(session_id)

        session = self._sessions.update(session_id, fields)
        if not session:
            raise NotFoundError(TRAINING_NOT_FOUND)
        return session

    def delete_training(self, session_id: str) -> None:
        if not self._sessions.delete_by_id(session_id):
            raise NotFoundError(TRAINING_NOT_FOUND)

    def update_status(self, session_id: str, status: Any) -> TrainingSession:
        new_status = self._parse_status(status)
        session = self._sessions.update(session_id, {"status": new_status.value})
        if not session:
            raise NotFoundError(TRAINING_NOT_FOUND)
        logger.info("Training %s moved to %s", session.display_id, new_status.value)
        return session

    def add_feedback(self, session_id: str, payload: Mapping[str, Any]) -> TrainingSession:
        feedback = validate_feedback(payload)
        feedback["submittedAt"] = self._clock()
        session = self._sessions.push_feedback(session_id, feedback)
        if not session:
            raise NotFoundError(TRAINING_NOT_FOUND)
        return session

    def statistics(self) -> dict:
        by_status = {row["_id"]: row["count"] for row in self._sessions.count_by("status")}
        return {
            "totalTrainings": self._sessions.count(),
            "scheduledTrainings": by_status.get(TrainingStatus.SCHEDULED.value, 0),
            "ongoingTrainings": by_status.get(TrainingStatus.ONGOING.value, 0),
            "completedTrainings": by_status.get(TrainingStatus.COMPLETED.value, 0),
            "cancelledTrainings": by_status.get(TrainingStatus.CANCELLED.value, 0),
            "trainingsByType": self._sessions.count_by("type"),
            "trainingsByDepartment": self._sessions.count_by("department"),
        }

    @staticmethod
    def _parse_status(value: Any) -> TrainingStatus:
        try:
            return TrainingStatus(value)
        except ValueError:
            raise ValidationError("Invalid status value")
