"""
Image hosting for feedback photos and asset pictures.

Usage:
    host = build_image_host(settings)
    url = await host.upload(image, folder="tourist-feedback")

``NullImageHost`` is used when no hosting credentials are configured; it
uploads nothing and returns ``None``.
"""
import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import httpx

from wayamba.config import Settings
from wayamba.errors import UploadError

logger = logging.getLogger("Wayamba.images")

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


@dataclass(frozen=True)
class ImageUpload:
    """An image attached to a request."""
    content: bytes
    filename: str = "upload"
    content_type: str = "application/octet-stream"


@runtime_checkable
class ImageHost(Protocol):
    @property
    def is_configured(self) -> bool: ...

    async def upload(self, image: ImageUpload, folder: str) -> Optional[str]: ...


class NullImageHost:
    """Image host used when no hosting service is configured."""

    is_configured = False

    async def upload(self, image: ImageUpload, folder: str) -> Optional[str]:
        logger.warning(f"Image host not configured, discarding {image.filename} ({len(image.content)} bytes)")
        return None


class CloudinaryImageHost:
    """
    Uploads images to Cloudinary with a signed request.

    Returns the ``secure_url`` of the stored image. Any transport error or
    non-200 reply raises ``UploadError``.
    """

    is_configured = True

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, timeout: float = 30.0):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

    @property
    def upload_url(self) -> str:
        return CLOUDINARY_UPLOAD_URL.format(cloud_name=self.cloud_name)

    def sign(self, params: dict) -> str:
        """Cloudinary signature: sha1 of the sorted params followed by the API secret."""
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    async def upload(self, image: ImageUpload, folder: str) -> Optional[str]:
        params = {"folder": folder, "timestamp": str(int(time.time()))}
        payload = {**params, "api_key": self.api_key, "signature": self.sign(params)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.upload_url,
                    data=payload,
                    files={"file": (image.filename, image.content, image.content_type)},
                )
        except httpx.TimeoutException:
            logger.error(f"Cloudinary upload timed out for {image.filename}")
            raise UploadError()
        except httpx.HTTPError as e:
            logger.error(f"Cloudinary upload request failed: {e}")
            raise UploadError()

        if response.status_code != 200:
            logger.error(f"Cloudinary upload failed: {response.status_code} - {response.text[:500]}")
            raise UploadError()

        try:
            body = response.json()
        except ValueError:
            logger.error(f"Cloudinary reply is not JSON: {response.text[:500]}")
            raise UploadError()

        secure_url = body.get("secure_url") if isinstance(body, dict) else None
        if not secure_url:
            logger.error("Cloudinary reply has no secure_url")
            raise UploadError()

        logger.info(f"Uploaded {image.filename} to Cloudinary folder {folder}")
        return secure_url


def build_image_host(settings: Settings) -> ImageHost:
    if settings.cloudinary_configured:
        return CloudinaryImageHost(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
            timeout=settings.image_upload_timeout,
        )
    logger.warning("Cloudinary credentials not found. Image uploads are disabled.")
    return NullImageHost()
