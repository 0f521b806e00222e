from datetime import datetime, timezone

import pytest

from src.operations_hub.operations_hub.attachments.uploader import AttachmentUploader, UploadedFile
from src.operations_hub.operations_hub.core.enums import TrainingStatus, TrainingType
from src.operations_hub.operations_hub.core.exceptions import NotFoundError, ValidationError
from src.operations_hub.operations_hub.trainings.service import TrainingService
from tests.fakes import FakeAssetStore, InMemoryTrainings

FIXED_NOW = datetime(2025, 5, 1, 12, 0, tzinfo=timezone.utc)


def _payload(**overrides):
    payload = {
        "title": "Forklift safety",
        "trainer": "Trainer Tom",
        "site": "Warehouse",
        "department": "logistics",
        "date": "2025-05-20",
        "status": "completed",
    }
    payload.update(overrides)
    return payload


def _service():
    repo = InMemoryTrainings()
    store = FakeAssetStore(failing=("bad.mp4",))
    return TrainingService(repo, AttachmentUploader(store), clock=lambda: FIXED_NOW), repo, store


def test_create_training_forces_scheduled_status_and_defaults():
    service, _, _ = _service()

    session = service.create_training(_payload())

    assert session.status is TrainingStatus.SCHEDULED
    assert session.type is TrainingType.SAFETY
    assert session.max_attendees == 20
    assert session.display_id == "TRN001"
    assert session.feedback == ()


def test_create_training_uploads_into_training_folder_and_skips_failures():
    service, _, store = _service()
    files = [
        UploadedFile("intro.mp4", "video/mp4", b"v"),
        UploadedFile("bad.mp4", "video/mp4", b"v"),
    ]

    session = service.create_training(_payload(), files)

    assert [(a.name, a.type.value) for a in session.attachments] == [("intro.mp4", "video")]
    assert store.uploads == [("training-attachments", "intro.mp4")]


def test_create_training_validation_order_and_messages():
    service, repo, _ = _service()

    with pytest.raises(ValidationError, match="Invalid date format. Please use YYYY-MM-DD"):
        service.create_training(_payload(date=""))
    with pytest.raises(ValidationError, match="Title and trainer are required fields"):
        service.create_training(_payload(trainer=None))
    with pytest.raises(ValidationError, match="Type must be one of"):
        service.create_training(_payload(type="yoga"))

    assert repo.count() == 0


def test_update_status_and_invalid_status():
    service, _, _ = _service()
    session = service.create_training(_payload())

    updated = service.update_status(session.session_id, "ongoing")
    assert updated.status is TrainingStatus.ONGOING

    with pytest.raises(ValidationError, match="Invalid status value"):
        service.update_status(session.session_id, "paused")
    with pytest.raises(NotFoundError, match="Training session not found"):
        service.update_status("000000000000000000000000", "completed")


def test_add_feedback_appends_entry_with_timestamp():
    service, _, _ = _service()
    session = service.create_training(_payload())

    updated = service.add_feedback(
        session.session_id, {"employeeId": "E1", "employeeName": "Ana", "rating": 4, "comment": "Useful"}
    )
    updated = service.add_feedback(session.session_id, {"employeeId": "E2", "employeeName": "Ben", "rating": 5})

    assert [f.employee_id for f in updated.feedback] == ["E1", "E2"]
    assert updated.feedback[0].submitted_at == FIXED_NOW
    assert updated.average_rating == 4.5


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"employeeName": "Ana", "rating": 3}, "Employee ID is required"),
        ({"employeeId": "E1", "rating": 3}, "Employee name is required"),
        ({"employeeId": "E1", "employeeName": "Ana", "rating": 6}, "Rating cannot exceed 5"),
        ({"employeeId": "E1", "employeeName": "Ana", "rating": 0}, "Rating must be at least 1"),
        ({"employeeId": "E1", "employeeName": "Ana"}, "Rating is required"),
    ],
)
def test_add_feedback_validation(payload, message):
    service, _, _ = _service()
    session = service.create_training(_payload())
    with pytest.raises(ValidationError, match=message):
        service.add_feedback(session.session_id, payload)


def test_statistics_group_by_status_type_and_department():
    service, _, _ = _service()
    a = service.create_training(_payload())
    service.create_training(_payload(type="technical", department="office"))
    service.update_status(a.session_id, "cancelled")

    stats = service.statistics()

    assert stats["totalTrainings"] == 2
    assert stats["scheduledTrainings"] == 1
    assert stats["cancelledTrainings"] == 1
    assert stats["ongoingTrainings"] == 0
    assert {r["_id"]: r["count"] for r in stats["trainingsByType"]} == {"safety": 1, "technical": 1}
    assert {r["_id"]: r["count"] for r in stats["trainingsByDepartment"]} == {"logistics": 1, "office": 1}
