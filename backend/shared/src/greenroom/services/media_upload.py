"""Photo upload relay backed by S3.

Membership and social-entry forms need a photo that matches the attendee's ID.
The browser posts the file here; it is stored under a fresh key and the
public URL is returned for the form to submit with the order.
"""

import logging
import mimetypes
import os
import uuid
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from greenroom.config import Settings, get_settings
from greenroom.models.errors import ErrorCode, UploadError, UpstreamError
from greenroom.models.uploads import UploadResult

logger = logging.getLogger(__name__)


class MediaUploadService:
    """Validates and stores a single uploaded image."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._client = None

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client("s3", region_name=self._settings.aws_region)
        return self._client

    @staticmethod
    def _extension(filename: str | None, content_type: str) -> str:
        ext = os.path.splitext(filename or "")[1].lower()
        if ext and len(ext) <= 6:
            return ext
        return mimetypes.guess_extension(content_type) or ""

    def _public_url(self, key: str) -> str:
        base = self._settings.upload_public_base_url
        if base:
            return f"{base.rstrip('/')}/{key}"
        return f"https://{self._settings.upload_bucket}.s3.{self._settings.aws_region}.amazonaws.com/{key}"

    def check(self, content_type: str | None, size: int) -> None:
        """Reject uploads that are empty, too large or not images.

        Raises:
            UploadError: with the matching UPLOAD_* code
        """
        if size <= 0:
            raise UploadError(ErrorCode.UPLOAD_MISSING_FILE)
        if size > self._settings.upload_max_bytes:
            raise UploadError(
                ErrorCode.UPLOAD_TOO_LARGE,
                details={"max_bytes": str(self._settings.upload_max_bytes)},
            )
        if not (content_type or "").lower().startswith("image/"):
            raise UploadError(
                ErrorCode.UPLOAD_NOT_IMAGE, details={"content_type": content_type or "unknown"}
            )

    def upload(self, filename: str | None, content_type: str | None, data: bytes) -> UploadResult:
        """Store an image and return its public location.

        Args:
            filename: Client-side filename (used only for the extension)
            content_type: MIME type reported by the client
            data: File contents

        Returns:
            UploadResult with the public URL and store key

        Raises:
            UploadError: If the file is rejected
            UpstreamError: If the bucket is not configured or S3 fails
        """
        self.check(content_type, len(data))

        bucket = self._settings.upload_bucket
        if not bucket:
            raise UpstreamError(
                ErrorCode.CONFIGURATION_MISSING, details={"setting": "UPLOAD_BUCKET"}
            )

        folder = self._settings.upload_folder.strip("/")
        key = f"{folder}/{uuid.uuid4().hex}{self._extension(filename, content_type)}"

        try:
            self._get_client().put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Upload to s3://%s/%s failed: %s", bucket, key, e)
            raise UpstreamError(ErrorCode.UPLOAD_FAILED, details={"reason": str(e)}) from e

        logger.info("Stored upload %s (%d bytes)", key, len(data))
        return UploadResult(url=self._public_url(key), public_id=key)


@lru_cache(maxsize=1)
def get_media_upload_service() -> MediaUploadService:
    """Get the shared MediaUploadService instance."""
    return MediaUploadService()
