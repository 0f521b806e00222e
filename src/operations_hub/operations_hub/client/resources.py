from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from ..core.constants import MAX_PAGE_LIMIT
from ..core.exceptions import ValidationError
from .base import ApiClient, ApiError, Paged

logger = logging.getLogger(__name__)

# (filename, content, mimetype)
FileTuple = tuple[str, bytes, str]


def _multipart(payload: dict, files: Sequence[FileTuple]) -> dict[str, Any]:
    return {
        "data": {"data": json.dumps(payload, default=str)},
        "files": [("attachments", (name, content, mimetype)) for name, content, mimetype in files],
    }


class InventoryClient:
    """Reads degrade to empty results on failure; writes raise ``ApiError``."""

    def __init__(self, api: ApiClient):
        self._api = api

    def list_items(self, **filters: Any) -> list[dict]:
        """Every matching item, following the server's pages."""
        params = dict(filters, limit=MAX_PAGE_LIMIT)
        items: list[dict] = []
        page = 1
        try:
            while True:
                result = self._api.get_page("/inventory", params=dict(params, page=page))
                items.extend(result.items)
                if not result.items or page >= result.total_pages:
                    return items
                page += 1
        except ApiError as e:
            logger.error("Failed to fetch inventory: %s", e)
            return []

    def get_item(self, item_id: str) -> Optional[dict]:
        try:
            return self._api.get_data(f"/inventory/{item_id}")
        except ApiError as e:
            logger.error("Failed to fetch inventory item %s: %s", item_id, e)
            return None

    def low_stock(self) -> list[dict]:
        try:
            return self._api.get_data("/inventory/low-stock", many=True)
        except ApiError as e:
            logger.error("Failed to fetch low stock items: %s", e)
            return []

    def stats(self) -> Optional[dict]:
        try:
            return self._api.get_data("/inventory/stats")
        except ApiError as e:
            logger.error("Failed to fetch inventory stats: %s", e)
            return None

    def create_item(self, payload: dict) -> dict:
        return self._api.send("POST", "/inventory", json=payload)

    def update_item(self, item_id: str, payload: dict) -> dict:
        return self._api.send("PUT", f"/inventory/{item_id}", json=payload)

    def delete_item(self, item_id: str) -> None:
        self._api.request("DELETE", f"/inventory/{item_id}")

    def adjust_stock(self, item_id: str, quantity: float, *, change: Optional[str] = None) -> dict:
        body = {"quantity": quantity, "user": self._api.context.current_manager()}
        if change:
            body["change"] = change
        return self._api.send("PATCH", f"/inventory/{item_id}/stock", json=body)


class ShiftClient:
    def __init__(self, api: ApiClient):
        self._api = api

    def list_shifts(self, **filters: Any) -> Paged:
        return self._api.get_page("/shifts", params=filters)

    def get_shift(self, shift_id: str) -> dict:
        return self._api.get_data(f"/shifts/{shift_id}")

    def stats(self) -> dict:
        return self._api.get_data("/shifts/stats")

    def create_shift(self, payload: dict) -> dict:
        return self._api.send("POST", "/shifts", json=payload)

    def update_shift(self, shift_id: str, payload: dict) -> dict:
        return self._api.send("PUT", f"/shifts/{shift_id}", json=payload)

    def delete_shift(self, shift_id: str) -> None:
        self._api.request("DELETE", f"/shifts/{shift_id}")

    def assign_employee(self, shift_id: str, employee_id: str) -> dict:
        return self._api.send("POST", f"/shifts/{shift_id}/assign", json={"employeeId": employee_id})

    def remove_employee(self, shift_id: str, employee_id: str) -> dict:
        return self._api.send("POST", f"/shifts/{shift_id}/remove", json={"employeeId": employee_id})


class BriefingClient:
    def __init__(self, api: ApiClient):
        self._api = api

    def list_briefings(self, **filters: Any) -> Paged:
        return self._api.get_page("/briefings", params=filters)

    def get_briefing(self, briefing_id: str) -> dict:
        return self._api.get_data(f"/briefings/{briefing_id}")

    def stats(self) -> dict:
        return self._api.get_data("/briefings/stats")

    def create_briefing(self, payload: dict, files: Sequence[FileTuple] = ()) -> dict:
        return self._api.send("POST", "/briefings", **_multipart(payload, files))

    def update_briefing(self, briefing_id: str, payload: dict) -> dict:
        return self._api.send("PUT", f"/briefings/{briefing_id}", json=payload)

    def delete_briefing(self, briefing_id: str) -> None:
        self._api.request("DELETE", f"/briefings/{briefing_id}")

    def update_action_item_status(self, briefing_id: str, item_id: str, status: str) -> dict:
        return self._api.send(
            "PATCH", f"/briefings/{briefing_id}/action-items/{item_id}", json={"status": status}
        )


class TrainingClient:
    def __init__(self, api: ApiClient):
        self._api = api

    def list_trainings(self, **filters: Any) -> Paged:
        return self._api.get_page("/trainings", params=filters)

    def get_training(self, session_id: str) -> dict:
        return self._api.get_data(f"/trainings/{session_id}")

    def stats(self) -> dict:
        return self._api.get_data("/trainings/stats")

    def create_training(self, payload: dict, files: Sequence[FileTuple] = ()) -> dict:
        return self._api.send("POST", "/trainings", **_multipart(payload, files))

    def update_training(self, session_id: str, payload: dict) -> dict:
        return self._api.send("PUT", f"/trainings/{session_id}", json=payload)

    def delete_training(self, session_id: str) -> None:
        self._api.request("DELETE", f"/trainings/{session_id}")

    def update_status(self, session_id: str, status: str) -> dict:
        return self._api.send("PATCH", f"/trainings/{session_id}/status", json={"status": status})

    def add_feedback(self, session_id: str, *, employee_id: str, employee_name: str, rating: int, comment: str = "") -> dict:
        body = {"employeeId": employee_id, "employeeName": employee_name, "rating": rating, "comment": comment}
        return self._api.send("POST", f"/trainings/{session_id}/feedback", json=body)


class ResourceClient:
    """Plain CRUD over one resource family (payments, expenses, roster, ...)."""

    RESOURCES = ("payments", "expenses", "roster", "supervisors", "users", "alerts")

    def __init__(self, api: ApiClient, resource: str):
        if resource not in self.RESOURCES:
            raise ValueError(f"Unknown resource: {resource}")
        self._api = api
        self.resource = resource

    def list(self, **filters: Any) -> list[dict]:
        return self._api.get_data(f"/{self.resource}", params=filters, many=True)

    def get(self, record_id: str) -> dict:
        return self._api.get_data(f"/{self.resource}/{record_id}")

    def create(self, payload: dict) -> dict:
        return self._api.send("POST", f"/{self.resource}", json=payload)

    def update(self, record_id: str, payload: dict) -> dict:
        return self._api.send("PUT", f"/{self.resource}/{record_id}", json=payload)

    def delete(self, record_id: str) -> None:
        self._api.request("DELETE", f"/{self.resource}/{record_id}")


class AuthClient:
    def __init__(self, api: ApiClient):
        self._api = api

    def login(self, email: str, password: str) -> dict:
        if not email or not password:
            raise ValidationError("Email and password are required")
        body = self._api.request("POST", "/auth/login", json={"email": email, "password": password})
        data = self._api.unwrap(body)
        token = data.get("token") or (body.get("token") if isinstance(body, dict) else None)
        if not token:
            raise ApiError("Login response did not include a token", payload=body)
        user = data.get("user") or (body.get("user") if isinstance(body, dict) else None) or {}
        self._api.context.sign_in(token, user)
        return user

    def logout(self) -> None:
        self._api.context.sign_out()

    def current_user(self) -> Optional[dict]:
        return self._api.context.user
