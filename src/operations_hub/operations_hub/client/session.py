"""Explicit client-side session state.

The dashboard keeps the auth token and signed-in user here instead of in a
process-wide global; the storage backend is injectable so tests can use
``MemoryStorage``.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class TokenStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(TokenStorage):
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileStorage(TokenStorage):
    """Key/value pairs persisted to a small JSON file."""

    def __init__(self, path: str):
        self._path = path

    def _load(self) -> dict[str, str]:
        if not os.path.exists(self._path):
            return {}
        with open(self._path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except ValueError:
                logger.warning("Ignoring unreadable session file %s", self._path)
                return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, str]) -> None:
        folder = os.path.dirname(self._path)
        if folder and not os.path.exists(folder):
            os.makedirs(folder)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class SessionContext:
    def __init__(self, storage: Optional[TokenStorage] = None):
        self._storage = storage if storage is not None else MemoryStorage()

    @property
    def token(self) -> Optional[str]:
        return self._storage.get(TOKEN_KEY)

    @property
    def user(self) -> Optional[dict[str, Any]]:
        raw = self._storage.get(USER_KEY)
        if not raw:
            return None
        try:
            user = json.loads(raw)
        except ValueError:
            return None
        return user if isinstance(user, dict) else None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def sign_in(self, token: str, user: Optional[dict[str, Any]] = None) -> None:
        self._storage.set(TOKEN_KEY, token)
        if user is not None:
            self._storage.set(USER_KEY, json.dumps(user))

    def sign_out(self) -> None:
        self._storage.remove(TOKEN_KEY)
        self._storage.remove(USER_KEY)

    def current_manager(self, default: str = "Unknown") -> str:
        """Display name recorded on stock movements and briefings."""
        user = self.user or {}
        return user.get("name") or user.get("email") or default

    def auth_headers(self) -> dict[str, str]:
        token = self.token
        return {"Authorization": f"Bearer {token}"} if token else {}
