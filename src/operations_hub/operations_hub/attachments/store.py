from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import cloudinary
import cloudinary.uploader

from ..core.exceptions import AssetStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredAsset:
    url: str
    bytes: int
    public_id: str = ""


class AssetStore(Protocol):
    """External object store for uploaded attachments."""

    def upload(self, content: bytes, *, folder: str, filename: str) -> Optional[StoredAsset]:
        raise NotImplementedError


class CloudinaryAssetStore(AssetStore):
    def __init__(self, *, cloud_name: str, api_key: str, api_secret: str):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    def upload(self, content: bytes, *, folder: str, filename: str) -> Optional[StoredAsset]:
        stream = io.BytesIO(content)
        stream.name = filename
        result = cloudinary.uploader.upload(stream, folder=folder, resource_type="auto")
        if not result or not result.get("secure_url"):
            return None

        logger.info("Uploaded %s to %s (%s)", filename, folder, result.get("public_id"))
        return StoredAsset(
            url=result["secure_url"],
            bytes=int(result.get("bytes") or 0),
            public_id=result.get("public_id") or "",
        )


class UnconfiguredAssetStore(AssetStore):
    """Used when no storage credentials are set; every upload is refused."""

    def upload(self, content: bytes, *, folder: str, filename: str) -> Optional[StoredAsset]:
        raise AssetStoreError("Asset storage is not configured")


def build_asset_store(config: dict) -> AssetStore:
    cloud_name = config.get("cloud_name")
    api_key = config.get("api_key")
    api_secret = config.get("api_secret")
    if not (cloud_name and api_key and api_secret):
        logger.warning("Cloudinary credentials missing; attachments will not be stored")
        return UnconfiguredAssetStore()
    return CloudinaryAssetStore(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret)
