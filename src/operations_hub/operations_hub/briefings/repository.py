from __future__ import annotations

from typing import Optional, Protocol

from ..common.listing import ListQuery, Page
from .model import StaffBriefing


class BriefingRepository(Protocol):
    def list(self, query: ListQuery) -> Page[StaffBriefing]:
        raise NotImplementedError

    def get_by_id(self, briefing_id: str) -> Optional[StaffBriefing]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def count_by(self, field: str) -> list[dict]:
        """``[{"_id": value, "count": n}, ...]`` grouped on a top-level field."""
        raise NotImplementedError

    def count_pending_actions(self) -> int:
        raise NotImplementedError

    def create(self, fields: dict) -> StaffBriefing:
        raise NotImplementedError

    def update(self, briefing_id: str, fields: dict) -> Optional[StaffBriefing]:
        raise NotImplementedError

    def delete_by_id(self, briefing_id: str) -> bool:
        raise NotImplementedError

    def set_action_item_status(self, briefing_id: str, item_id: str, status: str) -> Optional[StaffBriefing]:
        """``None`` when either the briefing or the action item does not exist."""
        raise NotImplementedError
