"""
Outline
upload_image()
destroy_image()
public_id_from_url()
"""

import re
from typing import Any

import cloudinary.exceptions
import cloudinary.uploader
from starlette.concurrency import run_in_threadpool

from hr_service.core.logging import get_logger

logger = get_logger(__name__)

# .../image/upload/v1712345678/Hr_management/abc123.png -> Hr_management/abc123
_PUBLIC_ID_RE = re.compile(r"/upload/(?:v\d+/)?(?P<public_id>.+?)(?:\.[A-Za-z0-9]+)?$")


def public_id_from_url(url: str) -> str:
    """Extract the Cloudinary public id (folder included) from a delivery URL."""
    match = _PUBLIC_ID_RE.search(url)
    if not match:
        raise ValueError(f"Not a Cloudinary upload URL: {url}")
    return match.group("public_id")


class CloudinaryClient:
    """
    Client for the Cloudinary image API.
    Used as the remote object store for employee photos.
    """

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str):
        """
        Initialize the Cloudinary client.

        Args:
            cloud_name: Cloudinary cloud name
            api_key: API key used to sign requests
            api_secret: API secret used to sign requests
            folder: Folder uploaded images are placed in
        """
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder

    @property
    def credentials(self) -> dict[str, Any]:
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
        }

    async def upload_image(self, content: bytes, filename: str) -> str:
        """
        Upload an image and return its absolute ``secure_url``.

        The SDK call is blocking, so it runs in the threadpool.

        Raises:
            cloudinary.exceptions.Error: if the upload is rejected
        """
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                content,
                folder=self.folder,
                resource_type="image",
                filename=filename,
                **self.credentials,
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Error uploading {filename} to Cloudinary: {str(e)}")
            raise

        secure_url = result["secure_url"]
        logger.info(f"Uploaded {filename} to Cloudinary: {secure_url}")
        return secure_url

    async def destroy_image(self, url: str) -> None:
        """
        Delete a previously uploaded image by its delivery URL.

        Raises:
            cloudinary.exceptions.Error: if the request is rejected
        """
        public_id = public_id_from_url(url)
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.destroy,
                public_id,
                resource_type="image",
                invalidate=True,
                **self.credentials,
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Error deleting {public_id} from Cloudinary: {str(e)}")
            raise

        logger.info(f"Deleted {public_id} from Cloudinary: {result.get('result')}")
