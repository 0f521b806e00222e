from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests

from ..core.constants import DEFAULT_API_PORT, DEFAULT_CLIENT_TIMEOUT_SECONDS
from .session import SessionContext

logger = logging.getLogger(__name__)

ALL = "all"


class ApiError(Exception):
    """A failed API call: transport error, non-2xx status or ``success: false``."""

    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload


@dataclass(frozen=True)
class Paged:
    items: list[dict] = field(default_factory=list)
    total: int = 0
    page: int = 1
    total_pages: int = 0


def build_base_url(host: str = "localhost", port: int = DEFAULT_API_PORT) -> str:
    """``http://<host>:<port>/api`` unless ``API_BASE_URL`` is set."""
    override = os.getenv("API_BASE_URL")
    if override:
        return override.rstrip("/")
    return f"http://{host}:{port}/api"


def normalize_ids(value: Any) -> Any:
    """Copy ``_id`` into ``id`` on every object that lacks one, recursively."""
    if isinstance(value, list):
        return [normalize_ids(v) for v in value]
    if isinstance(value, dict):
        out = {k: normalize_ids(v) for k, v in value.items()}
        if not out.get("id") and out.get("_id"):
            out["id"] = str(out["_id"])
        return out
    return value


def clean_params(params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Drop empty and ``"all"`` filters so the server applies no constraint."""
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None and v != "" and v != ALL}


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_CLIENT_TIMEOUT_SECONDS,
        context: Optional[SessionContext] = None,
    ):
        self.base_url = (base_url or build_base_url()).rstrip("/")
        self.context = context or SessionContext()
        self._http = session or requests.Session()
        self._timeout = timeout

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        data: Any = None,
        files: Any = None,
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s", method, url)
        try:
            resp = self._http.request(
                method,
                url,
                params=clean_params(params),
                json=json,
                data=data,
                files=files,
                headers=self.context.auth_headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise ApiError(f"Network error: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        failed = isinstance(body, dict) and body.get("success") is False
        if not resp.ok or failed:
            message = body.get("message") if isinstance(body, dict) else None
            if resp.status_code >= 500:
                logger.error("%s %s -> %s", method, url, resp.status_code)
            else:
                logger.warning("%s %s -> %s", method, url, resp.status_code)
            raise ApiError(message or resp.reason or f"HTTP {resp.status_code}", resp.status_code, body)
        return body

    @staticmethod
    def unwrap(body: Any, *, many: bool = False) -> Any:
        """Envelope ``data`` (or a bare body), defaulting to ``[]``/``{}`` when absent."""
        default: Any = [] if many else {}
        if isinstance(body, dict) and "success" in body:
            data = body.get("data")
        else:
            data = body
        if data is None:
            return default
        return normalize_ids(data)

    def get_data(self, path: str, *, params: Optional[Mapping[str, Any]] = None, many: bool = False) -> Any:
        return self.unwrap(self.request("GET", path, params=params), many=many)

    def get_page(self, path: str, *, params: Optional[Mapping[str, Any]] = None) -> Paged:
        body = self.request("GET", path, params=params)
        items = self.unwrap(body, many=True)
        if not isinstance(body, dict):
            return Paged(items=items, total=len(items), page=1, total_pages=1 if items else 0)
        return Paged(
            items=items,
            total=int(body.get("total", len(items)) or 0),
            page=int(body.get("page", 1) or 1),
            total_pages=int(body.get("totalPages", 0) or 0),
        )

    def send(self, method: str, path: str, **kwargs: Any) -> Any:
        return self.unwrap(self.request(method, path, **kwargs))
