"""Uniform JSON envelope ``{success, data?, message?, ...}`` and error mapping."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable

from flask import current_app, jsonify, request

from ..common.listing import Page
from ..core.exceptions import DuplicateKeyError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def success(data: Any = None, *, message: str = "", status: int = 200, **extra: Any):
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    body.update(extra)
    return jsonify(body), status


def failure(message: str, status: int, **extra: Any):
    body: dict[str, Any] = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def page_response(page: Page, items: list):
    return success(items, total=page.total, page=page.page, totalPages=page.total_pages)


def api_errors(default_message: str) -> Callable:
    """Map domain errors raised by a view to status codes.

    NotFoundError -> 404, ValidationError/DuplicateKeyError -> 400, anything
    else -> 500 with ``default_message``. The error is always logged.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except NotFoundError as e:
                logger.info("%s %s -> 404: %s", request.method, request.path, e)
                return failure(str(e), 404)
            except (ValidationError, DuplicateKeyError) as e:
                logger.warning("%s %s -> 400: %s", request.method, request.path, e)
                return failure(str(e), 400)
            except Exception as e:
                logger.exception("%s %s failed", request.method, request.path)
                if bool(current_app.config.get("DEBUG", False)):
                    return failure(default_message, 500, details=str(e))
                return failure(default_message, 500)

        return wrapper

    return decorator
