from __future__ import annotations

from typing import Optional, Protocol

from ..common.listing import ListQuery, Page
from .model import TrainingSession


class TrainingRepository(Protocol):
    def list(self, query: ListQuery) -> Page[TrainingSession]:
        raise NotImplementedError

    def get_by_id(self, session_id: str) -> Optional[TrainingSession]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def count_by(self, field: str) -> list[dict]:
        raise NotImplementedError

    def create(self, fields: dict) -> TrainingSession:
        raise NotImplementedError

    def update(self, session_id: str, fields: dict) -> Optional[TrainingSession]:
        raise NotImplementedError

    def delete_by_id(self, session_id: str) -> bool:
        raise NotImplementedError

    def push_feedback(self, session_id: str, feedback: dict) -> Optional[TrainingSession]:
        raise NotImplementedError
