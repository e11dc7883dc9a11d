"""
Employee photo storage.

The directory only ever keeps a reference string to a photo: a path under
the static upload mount for local storage, or an absolute URL for the
remote object store.
"""

import os
import uuid
from typing import Protocol

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from hr_service.api.clients.cloudinary import CloudinaryClient
from hr_service.core.config import Settings
from hr_service.core.exceptions import ValidationError
from hr_service.core.logging import get_logger

logger = get_logger(__name__)

ALLOWED_PHOTO_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}

PHOTO_CHUNK_SIZE = 64 * 1024


def validate_photo_type(content_type: str) -> None:
    if content_type not in ALLOWED_PHOTO_TYPES:
        raise ValidationError("Only JPEG, PNG, and WebP images are allowed")


def photo_too_large(max_size: int) -> ValidationError:
    return ValidationError(f"Photo must not exceed {max_size // (1024 * 1024)}MB")


async def read_photo(upload: UploadFile, max_size: int) -> bytes:
    """
    Read an uploaded photo, rejecting it as soon as it grows past ``max_size``.

    Raises:
        ValidationError: unsupported content type or oversized file
    """
    validate_photo_type(upload.content_type or "")

    chunks = []
    size = 0
    while True:
        chunk = await upload.read(PHOTO_CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > max_size:
            raise photo_too_large(max_size)
        chunks.append(chunk)
    return b"".join(chunks)


class PhotoStorage(Protocol):
    def prepare(self) -> None:
        ...

    async def save(self, content: bytes, filename: str, content_type: str) -> str:
        ...

    async def delete(self, reference: str) -> None:
        ...


class LocalPhotoStorage:
    """Stores photos on local disk, served read-only under ``url_prefix``."""

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads"):
        self.upload_dir = os.path.abspath(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def prepare(self) -> None:
        os.makedirs(self.upload_dir, exist_ok=True)

    def _write(self, path: str, content: bytes) -> None:
        self.prepare()
        with open(path, "wb") as f:
            f.write(content)

    async def save(self, content: bytes, filename: str, content_type: str) -> str:
        stored_name = f"{uuid.uuid4().hex}{ALLOWED_PHOTO_TYPES[content_type]}"
        await run_in_threadpool(
            self._write, os.path.join(self.upload_dir, stored_name), content
        )
        logger.info(f"Stored photo {filename} as {stored_name}")
        return f"{self.url_prefix}/{stored_name}"

    async def delete(self, reference: str) -> None:
        if not reference.startswith(f"{self.url_prefix}/"):
            raise ValueError(f"Not a local photo reference: {reference}")
        stored_name = os.path.basename(reference)
        await run_in_threadpool(os.remove, os.path.join(self.upload_dir, stored_name))
        logger.info(f"Removed photo {stored_name}")


class CloudinaryPhotoStorage:
    """Stores photos in Cloudinary and keeps the returned absolute URL."""

    def __init__(self, client: CloudinaryClient):
        self.client = client

    def prepare(self) -> None:
        pass

    async def save(self, content: bytes, filename: str, content_type: str) -> str:
        return await self.client.upload_image(content, filename)

    async def delete(self, reference: str) -> None:
        await self.client.destroy_image(reference)


async def discard_photo(storage: PhotoStorage, reference: str) -> None:
    """
    Remove a photo that was stored for a write that then failed.

    Cleanup failures are logged; the caller re-raises the original error.
    """
    try:
        await storage.delete(reference)
    except Exception as e:
        logger.warning(f"Could not remove orphaned photo {reference}: {str(e)}")


def build_photo_storage(settings: Settings) -> PhotoStorage:
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "cloudinary":
        return CloudinaryPhotoStorage(
            CloudinaryClient(
                cloud_name=settings.CLOUDINARY_CLOUD_NAME,
                api_key=settings.CLOUDINARY_API_KEY,
                api_secret=settings.CLOUDINARY_API_SECRET,
                folder=settings.CLOUDINARY_FOLDER,
            )
        )
    if backend == "local":
        return LocalPhotoStorage(settings.UPLOAD_PATH, settings.UPLOAD_URL_PREFIX)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")
