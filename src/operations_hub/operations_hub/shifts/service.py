from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from ..common.listing import ListQuery, Page
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import LISTING, Shift, check_time_window, validate_shift_fields
from .repository import ShiftRepository

logger = logging.getLogger(__name__)

SHIFT_NOT_FOUND = "Shift not found"


class ShiftService:
    """Use cases: maintain shifts and their employee rosters."""

    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def list_shifts(self, query: ListQuery) -> Page[Shift]:
        return self._shifts.list(LISTING.validate(query))

    def get_shift(self, shift_id: str) -> Shift:
        shift = self._shifts.get_by_id(shift_id)
        if not shift:
            raise NotFoundError(SHIFT_NOT_FOUND)
        return shift

    def create_shift(self, payload: Mapping[str, Any]) -> Shift:
        if not payload.get("name") or not payload.get("startTime") or not payload.get("endTime"):
            raise ValidationError("Name, startTime, and endTime are required")

        fields = validate_shift_fields(payload)
        check_time_window(fields["startTime"], fields["endTime"])
        shift = self._shifts.create(fields)
        logger.info("Shift %s created (%s-%s)", shift.shift_id, shift.start_time, shift.end_time)
        return shift

    def update_shift(self, shift_id: str, payload: Mapping[str, Any]) -> Shift:
        fields = validate_shift_fields(payload, partial=True)
        current = self.get_shift(shift_id)
        check_time_window(fields.get("startTime", current.start_time), fields.get("endTime", current.end_time))
        if not fields:
            return current

        shift = self._shifts.update(shift_id, fields)
        if not shift:
            raise NotFoundError(SHIFT_NOT_FOUND)
        return shift

    def delete_shift(self, shift_id: str) -> None:
        if not self._shifts.delete_by_id(shift_id):
            raise NotFoundError(SHIFT_NOT_FOUND)

    def assign_employee(self, shift_id: str, employee_id: Any) -> Shift:
        employee_id = require_non_empty(employee_id, "Employee ID")
        shift = self.get_shift(shift_id)
        if employee_id in shift.employees:
            raise ValidationError("Employee already assigned to this shift")

        updated = self._shifts.add_employee(shift_id, employee_id)
        if not updated:
            raise NotFoundError(SHIFT_NOT_FOUND)
        return updated

    def remove_employee(self, shift_id: str, employee_id: Any) -> Shift:
        employee_id = require_non_empty(employee_id, "Employee ID")
        updated = self._shifts.remove_employee(shift_id, employee_id)
        if not updated:
            raise NotFoundError(SHIFT_NOT_FOUND)
        return updated

    def statistics(self) -> dict:
        shifts = self._shifts.list_all()
        total_shifts = len(shifts)
        total_assigned = sum(len(s.employees) for s in shifts)
        # Half-up rounding, matching what the dashboard shows.
        average = math.floor(total_assigned / total_shifts + 0.5) if total_shifts else 0
        return {
            "totalShifts": total_shifts,
            "totalEmployeesAssigned": total_assigned,
            "avgEmployeesPerShift": int(average),
        }
