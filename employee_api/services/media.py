"""
Employee photo storage on Cloudinary.

Uploads fail loudly (``MediaError``); deletes are best-effort cleanup and
never raise, so a Cloudinary outage cannot block record updates or deletes.
"""

from __future__ import annotations

import logging
from typing import Protocol
from urllib.parse import urlparse

import cloudinary
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from employee_api.core.config import Settings
from employee_api.core.exceptions import MediaError

logger = logging.getLogger(__name__)

_TRANSFORMATION = [
    {"width": 500, "height": 500, "crop": "limit"},
    {"quality": "auto"},
]


class MediaStore(Protocol):
    async def upload(self, image: str) -> str:
        """Store ``image`` (data URI, path or URL) and return its canonical URL."""
        ...

    async def delete(self, url: str) -> None:
        ...


def public_id_from_url(url: str) -> str:
    """Derive ``<folder>/<name>`` from a delivery URL, dropping the extension."""
    parts = [p for p in urlparse(url).path.split("/") if p]
    if not parts:
        raise ValueError(f"Cannot derive a public id from {url!r}")
    name = parts[-1].rsplit(".", 1)[0]
    folder = parts[-2] if len(parts) > 1 else ""
    return f"{folder}/{name}" if folder else name


class CloudinaryMediaStore:
    def __init__(
        self,
        cloud_name: str | None,
        api_key: str | None,
        api_secret: str | None,
        folder: str = "employee_photos",
    ) -> None:
        self.folder = folder
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> CloudinaryMediaStore:
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder=settings.MEDIA_FOLDER,
        )

    async def upload(self, image: str) -> str:
        # Already-hosted images are referenced as-is
        if image.startswith(("http://", "https://")):
            return image

        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                image,
                folder=self.folder,
                resource_type="image",
                transformation=_TRANSFORMATION,
            )
        except Exception as exc:
            logger.error("Cloudinary upload failed: %s", exc)
            raise MediaError(f"Failed to upload image: {exc}") from exc

        logger.info("Uploaded photo %s", result.get("public_id"))
        return result["secure_url"]

    async def delete(self, url: str) -> None:
        try:
            public_id = public_id_from_url(url)
            await run_in_threadpool(cloudinary.uploader.destroy, public_id)
        except Exception as exc:
            logger.warning("Cloudinary delete failed for %s: %s", url, exc)
            return
        logger.info("Deleted photo %s", public_id)
