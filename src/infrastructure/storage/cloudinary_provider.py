"""Cloudinary asset store implementation.

Uploads and removals go through the official ``cloudinary`` SDK. Its uploader
is blocking, so every call runs in a worker thread.
"""

import asyncio
import io
from typing import Any

import cloudinary.exceptions
import cloudinary.uploader
import structlog

from core.config import settings
from core.exceptions import AssetStoreError
from infrastructure.storage.provider import AssetUploadResult

logger = structlog.get_logger()


class CloudinaryAssetStore:
    """Photo storage backed by Cloudinary."""

    def __init__(
        self,
        cloud_name: str = settings.cloudinary_cloud_name,
        api_key: str = settings.cloudinary_api_key,
        api_secret: str = settings.cloudinary_api_secret,
        folder: str = settings.cloudinary_folder,
        transformation: str = settings.cloudinary_transformation,
        timeout: float = settings.asset_store_timeout_seconds,
    ) -> None:
        # Passed per call rather than through global cloudinary.config()
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "secure": True,
        }
        self._folder = folder
        self._transformation = transformation
        self._timeout = timeout

    async def upload(self, content: bytes, filename: str | None = None) -> AssetUploadResult:
        """Upload image bytes and return the secure URL and public ID."""
        if not content:
            raise AssetStoreError("Uploaded file is empty")

        body = await self._call(
            "upload",
            cloudinary.uploader.upload,
            io.BytesIO(content),
            folder=self._folder,
            transformation=self._transformation,
            resource_type="image",
        )

        secure_url = body.get("secure_url")
        public_id = body.get("public_id")
        if not secure_url or not public_id:
            raise AssetStoreError("Asset store returned an incomplete upload response")

        logger.info("asset_uploaded", public_id=public_id, size=len(content), filename=filename)
        return AssetUploadResult(url=secure_url, public_id=public_id)

    async def remove(self, public_id: str) -> None:
        """Destroy an uploaded image. Already-missing assets count as removed."""
        body = await self._call("destroy", cloudinary.uploader.destroy, public_id)

        result = body.get("result")
        if result not in ("ok", "not found"):
            raise AssetStoreError(f"Asset removal failed: {result}")

        logger.info("asset_removed", public_id=public_id, result=result)

    async def _call(self, action: str, func: Any, *args: Any, **options: Any) -> dict[str, Any]:
        try:
            body = await asyncio.to_thread(
                func, *args, timeout=self._timeout, **self._credentials, **options
            )
        except cloudinary.exceptions.Error as e:
            # The SDK raises with the store's own error message
            logger.warning("asset_store_error", action=action, message=str(e))
            raise AssetStoreError(str(e)) from e
        return dict(body or {})
