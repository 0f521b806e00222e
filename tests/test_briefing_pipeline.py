from datetime import datetime, timezone

import pytest

from src.operations_hub.operations_hub.attachments.uploader import AttachmentUploader, UploadedFile
from src.operations_hub.operations_hub.briefings.service import BriefingService
from src.operations_hub.operations_hub.common.listing import ListQuery
from src.operations_hub.operations_hub.core.enums import ActionItemStatus
from src.operations_hub.operations_hub.core.exceptions import NotFoundError, ValidationError
from tests.fakes import FakeAssetStore, InMemoryBriefings


def _payload(**overrides):
    payload = {
        "date": "2025-03-10",
        "time": "08:30",
        "conductedBy": "Supervisor Sam",
        "site": "North Plant",
        "department": "maintenance",
        "topics": ["Safety gear"],
        "actionItems": [
            {"description": "Replace gloves", "assignedTo": "E7", "dueDate": "2025-03-12", "priority": "high"},
        ],
    }
    payload.update(overrides)
    return payload


def _service(store=None):
    repo = InMemoryBriefings()
    store = store or FakeAssetStore()
    return BriefingService(repo, AttachmentUploader(store)), repo, store


def _file(name, mimetype="application/pdf", content=b"x"):
    return UploadedFile(filename=name, mimetype=mimetype, content=content)


def test_create_briefing_keeps_only_successful_uploads():
    store = FakeAssetStore(failing=("broken.pdf",), no_url=("nourl.png",))
    service, _, _ = _service(store)
    files = [
        _file("plan.pdf"),
        _file("broken.pdf"),
        _file("photo.png", "image/png", b"ab"),
        _file("nourl.png", "image/png"),
        _file("empty.pdf", content=b""),
    ]

    briefing = service.create_briefing(_payload(), files)

    assert [a.name for a in briefing.attachments] == ["plan.pdf", "photo.png"]
    assert [a.type.value for a in briefing.attachments] == ["document", "image"]
    assert briefing.attachments[1].size == "2.0 MB"
    assert all(folder == "briefing-attachments" for folder, _ in store.uploads)


def test_create_briefing_defaults_and_display_id():
    service, _, _ = _service()

    briefing = service.create_briefing(_payload())

    assert briefing.display_id == "BRI001"
    assert briefing.shift.value == "morning"
    assert briefing.attendees_count == 0
    assert briefing.key_points == ()
    assert briefing.date == datetime(2025, 3, 10, tzinfo=timezone.utc)
    item = briefing.action_items[0]
    assert item.status is ActionItemStatus.PENDING
    assert item.priority.value == "high"
    assert item.item_id


def test_invalid_briefing_date_fails_before_any_write():
    service, repo, _ = _service()

    with pytest.raises(ValidationError, match="Invalid briefing date format. Please use YYYY-MM-DD"):
        service.create_briefing(_payload(date="10/03/2025x"))

    assert repo.count() == 0


def test_invalid_action_item_due_date_fails_creation():
    service, repo, _ = _service()
    items = [{"description": "Check", "assignedTo": "E1", "dueDate": "someday"}]

    with pytest.raises(ValidationError, match="Invalid action item date format: someday"):
        service.create_briefing(_payload(actionItems=items))

    assert repo.count() == 0


def test_missing_conducted_by_leaves_count_unchanged():
    service, repo, _ = _service()
    service.create_briefing(_payload())
    before = repo.count()

    with pytest.raises(ValidationError, match="Conducted By and Site are required fields"):
        service.create_briefing(_payload(conductedBy=""))

    assert repo.count() == before


def test_sequential_display_ids_after_existing_records():
    service, repo, _ = _service()
    for _ in range(5):
        service.create_briefing(_payload())
    assert repo.count() == 5

    first = service.create_briefing(_payload())
    second = service.create_briefing(_payload())

    assert (first.display_id, second.display_id) == ("BRI006", "BRI007")


def test_stale_count_snapshot_produces_detectable_duplicate_display_id():
    service, repo, _ = _service()
    for _ in range(5):
        service.create_briefing(_payload())

    # Both requests read the count before either insert lands.
    repo.count = lambda: 5
    first = service.create_briefing(_payload())
    second = service.create_briefing(_payload())

    ids = [b.display_id for b in (first, second)]
    assert ids == ["BRI006", "BRI006"]
    assert first.briefing_id != second.briefing_id
    assert len(set(ids)) < len(ids)


def test_action_item_status_update_is_idempotent():
    service, _, _ = _service()
    briefing = service.create_briefing(_payload())
    item_id = briefing.action_items[0].item_id

    once = service.update_action_item_status(briefing.briefing_id, item_id, "completed")
    twice = service.update_action_item_status(briefing.briefing_id, item_id, "completed")

    assert once.action_item(item_id).status is ActionItemStatus.COMPLETED
    assert twice.action_items == once.action_items


def test_action_item_status_errors():
    service, _, _ = _service()
    briefing = service.create_briefing(_payload())

    with pytest.raises(ValidationError, match="Invalid status value"):
        service.update_action_item_status(briefing.briefing_id, briefing.action_items[0].item_id, "done")
    with pytest.raises(NotFoundError, match="Staff briefing or action item not found"):
        service.update_action_item_status(briefing.briefing_id, "000000000000000000000000", "completed")


def test_update_briefing_coerces_date_and_keeps_other_fields():
    service, _, _ = _service()
    briefing = service.create_briefing(_payload())

    updated = service.update_briefing(briefing.briefing_id, {"date": "2025-04-01", "shift": "night"})

    assert updated.date == datetime(2025, 4, 1, tzinfo=timezone.utc)
    assert updated.shift.value == "night"
    assert updated.conducted_by == "Supervisor Sam"

    with pytest.raises(ValidationError, match="Invalid briefing date format"):
        service.update_briefing(briefing.briefing_id, {"date": "not a date"})


def test_statistics_count_shifts_departments_and_pending_actions():
    service, _, _ = _service()
    service.create_briefing(_payload())
    service.create_briefing(_payload(shift="evening", department="cleaning"))
    b = service.create_briefing(_payload(shift="night"))
    service.update_action_item_status(b.briefing_id, b.action_items[0].item_id, "in_progress")

    stats = service.statistics()

    assert stats["totalBriefings"] == 3
    assert (stats["morningBriefings"], stats["eveningBriefings"], stats["nightBriefings"]) == (1, 1, 1)
    assert {r["_id"]: r["count"] for r in stats["briefingsByDepartment"]} == {"maintenance": 2, "cleaning": 1}
    assert stats["pendingActions"] == 2


def test_list_briefings_paginates_and_filters_by_shift():
    service, _, _ = _service()
    for day in range(1, 8):
        service.create_briefing(_payload(date=f"2025-03-{day:02d}", shift="evening" if day % 2 else "morning"))

    page = service.list_briefings(ListQuery(page=2, limit=3))
    assert page.total == 7
    assert page.total_pages == 3
    assert len(page.items) == 3
    assert [b.date.day for b in page.items] == [4, 3, 2]

    evening = service.list_briefings(ListQuery(shift="evening", limit=10))
    assert evening.total == 4

    with pytest.raises(ValidationError, match="Invalid shift filter"):
        service.list_briefings(ListQuery(shift="afternoon"))
