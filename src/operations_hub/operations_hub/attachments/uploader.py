from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Sequence

from ..common.datetime_utils import utcnow
from ..core.constants import ALLOWED_UPLOAD_PATTERN
from ..core.exceptions import ValidationError
from .model import Attachment, attachment_type_for, format_size_mb
from .store import AssetStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    """A file received in a multipart request, fully buffered in memory."""

    filename: str
    mimetype: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def is_allowed_upload(filename: str, mimetype: str) -> bool:
    """Both the extension and the MIME type must hit the allow-list."""
    return bool(
        ALLOWED_UPLOAD_PATTERN.search((filename or "").lower())
        and ALLOWED_UPLOAD_PATTERN.search((mimetype or "").lower())
    )


def check_uploads(files: Iterable[UploadedFile], *, max_bytes: int) -> None:
    for f in files:
        if not is_allowed_upload(f.filename, f.mimetype):
            raise ValidationError("Only images, documents, and videos are allowed")
        if f.size > max_bytes:
            raise ValidationError(f"File too large: {f.filename}")


class AttachmentUploader:
    """Pushes files to the asset store one at a time.

    A file that fails to upload is logged and left out; it never aborts the
    remaining files or the caller's write.
    """

    def __init__(self, store: AssetStore, *, clock: Callable[[], datetime] = utcnow):
        self._store = store
        self._clock = clock

    def upload_all(self, files: Sequence[UploadedFile], *, folder: str) -> list[Attachment]:
        attachments: list[Attachment] = []
        for f in files:
            if not f.content:
                logger.warning("Skipping %s: file has no content", f.filename)
                continue

            try:
                asset = self._store.upload(f.content, folder=folder, filename=f.filename)
            except Exception:
                logger.exception("Upload failed for %s", f.filename)
                continue

            if asset is None or not asset.url:
                logger.error("Upload of %s returned no URL", f.filename)
                continue

            attachments.append(
                Attachment(
                    name=f.filename,
                    type=attachment_type_for(f.mimetype),
                    url=asset.url,
                    size=format_size_mb(asset.bytes),
                    uploaded_at=self._clock(),
                )
            )

        logger.info("Stored %d of %d attachment(s) in %s", len(attachments), len(files), folder)
        return attachments
