from __future__ import annotations

import json
from typing import Any

from flask import current_app, request

from ..attachments.uploader import UploadedFile, check_uploads
from ..core.constants import DEFAULT_MAX_UPLOAD_MB
from ..core.exceptions import ValidationError


def json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def multipart_payload(label: str) -> tuple[dict[str, Any], list[UploadedFile]]:
    """Split a multipart create request into its JSON ``data`` field and files.

    Without a ``data`` field the remaining form fields are used as the payload.
    """
    raw = request.form.get("data")
    if raw is not None:
        try:
            payload = json.loads(raw or "{}")
        except ValueError as e:
            raise ValidationError(f"Invalid {label} data format: {e}")
        if not isinstance(payload, dict):
            raise ValidationError(f"Invalid {label} data format: expected an object")
    elif request.is_json:
        payload = json_body()
    else:
        payload = {key: value for key, value in request.form.items()}

    files = [
        UploadedFile(
            filename=storage.filename or "",
            mimetype=storage.mimetype or "",
            content=storage.read(),
        )
        for storage in request.files.getlist("attachments")
    ]
    max_bytes = int(current_app.config.get("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_MB * 1024 * 1024))
    check_uploads(files, max_bytes=max_bytes)
    return payload, files
