from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.listing import ListQuery, Page
from .model import Shift


class ShiftRepository(Protocol):
    def list(self, query: ListQuery) -> Page[Shift]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Shift]:
        raise NotImplementedError

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        raise NotImplementedError

    def create(self, fields: dict) -> Shift:
        raise NotImplementedError

    def update(self, shift_id: str, fields: dict) -> Optional[Shift]:
        raise NotImplementedError

    def delete_by_id(self, shift_id: str) -> bool:
        raise NotImplementedError

    def add_employee(self, shift_id: str, employee_id: str) -> Optional[Shift]:
        """Set-union add; adding an id already present leaves the shift unchanged."""
        raise NotImplementedError

    def remove_employee(self, shift_id: str, employee_id: str) -> Optional[Shift]:
        raise NotImplementedError
