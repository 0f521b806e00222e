import pytest

from src.operations_hub.operations_hub.common.listing import ListQuery
from src.operations_hub.operations_hub.core.exceptions import NotFoundError, ValidationError
from src.operations_hub.operations_hub.shifts.service import ShiftService
from tests.fakes import InMemoryShifts


def _service():
    repo = InMemoryShifts()
    return ShiftService(repo), repo


def test_create_shift_rejects_end_before_start_and_writes_nothing():
    service, repo = _service()

    with pytest.raises(ValidationError, match="End time must be after start time"):
        service.create_shift({"name": "Morning", "startTime": "09:00", "endTime": "08:00"})

    assert repo.store.docs == {}


def test_create_shift_rejects_equal_times():
    service, _ = _service()
    with pytest.raises(ValidationError, match="End time must be after start time"):
        service.create_shift({"name": "Morning", "startTime": "09:00", "endTime": "09:00"})


def test_create_shift_returns_short_id_from_database_id():
    service, _ = _service()

    shift = service.create_shift({"name": "Morning", "startTime": "09:00", "endTime": "17:00"})

    assert len(shift.short_id) == 6
    assert shift.shift_id.endswith(shift.short_id)
    assert shift.to_json()["id"] == shift.short_id


def test_create_shift_deduplicates_employees_keeping_first_seen_order():
    service, _ = _service()

    shift = service.create_shift(
        {"name": "Night", "startTime": "20:00", "endTime": "23:30", "employees": ["E2", " E1", "E2", "E1 ", "E3"]}
    )

    assert shift.employees == ("E2", "E1", "E3")


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"startTime": "09:00", "endTime": "17:00"}, "Name, startTime, and endTime are required"),
        ({"name": "M", "startTime": "09:00", "endTime": "17:00"}, "at least 2 characters"),
        ({"name": "x" * 51, "startTime": "09:00", "endTime": "17:00"}, "cannot exceed 50 characters"),
        ({"name": "Morning", "startTime": "9am", "endTime": "17:00"}, "HH:mm"),
        ({"name": "Morning", "startTime": "09:00", "endTime": "24:00"}, "HH:mm"),
    ],
)
def test_create_shift_validation(payload, message):
    service, _ = _service()
    with pytest.raises(ValidationError, match=message):
        service.create_shift(payload)


def test_update_shift_rechecks_merged_time_window():
    service, _ = _service()
    shift = service.create_shift({"name": "Morning", "startTime": "09:00", "endTime": "17:00"})

    with pytest.raises(ValidationError, match="End time must be after start time"):
        service.update_shift(shift.shift_id, {"endTime": "08:30"})

    updated = service.update_shift(shift.shift_id, {"endTime": "18:00", "employees": ["A", "A"]})
    assert updated.start_time == "09:00"
    assert updated.end_time == "18:00"
    assert updated.employees == ("A",)


def test_assign_employee_twice_is_rejected_and_set_unchanged():
    service, _ = _service()
    shift = service.create_shift({"name": "Morning", "startTime": "09:00", "endTime": "17:00"})

    service.assign_employee(shift.shift_id, "E1")
    with pytest.raises(ValidationError, match="already assigned"):
        service.assign_employee(shift.shift_id, " E1 ")

    assert service.get_shift(shift.shift_id).employees == ("E1",)


def test_assign_requires_employee_and_existing_shift():
    service, _ = _service()
    shift = service.create_shift({"name": "Morning", "startTime": "09:00", "endTime": "17:00"})

    with pytest.raises(ValidationError, match="Employee ID is required"):
        service.assign_employee(shift.shift_id, "")
    with pytest.raises(NotFoundError, match="Shift not found"):
        service.assign_employee("000000000000000000000000", "E1")


def test_remove_employee():
    service, _ = _service()
    shift = service.create_shift(
        {"name": "Morning", "startTime": "09:00", "endTime": "17:00", "employees": ["E1", "E2"]}
    )

    updated = service.remove_employee(shift.shift_id, "E1")

    assert updated.employees == ("E2",)


def test_statistics_round_average_half_up():
    service, _ = _service()
    service.create_shift({"name": "A shift", "startTime": "06:00", "endTime": "14:00", "employees": ["1", "2"]})
    service.create_shift({"name": "B shift", "startTime": "14:00", "endTime": "22:00", "employees": ["3"]})

    stats = service.statistics()

    assert stats == {"totalShifts": 2, "totalEmployeesAssigned": 3, "avgEmployeesPerShift": 2}


def test_statistics_empty():
    service, _ = _service()
    assert service.statistics()["avgEmployeesPerShift"] == 0


def test_list_shifts_search_matches_name_case_insensitively():
    service, _ = _service()
    service.create_shift({"name": "Morning", "startTime": "06:00", "endTime": "14:00"})
    service.create_shift({"name": "Evening", "startTime": "14:00", "endTime": "22:00"})

    page = service.list_shifts(ListQuery(search="morn"))

    assert [s.name for s in page.items] == ["Morning"]
    assert page.total == 1
