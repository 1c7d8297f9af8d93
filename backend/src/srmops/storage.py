"""S3-compatible storage client for record photos.

Photos are uploaded before a record is submitted; the returned public URL is
what clients send as ``photoUrl``.
"""

import hashlib
from datetime import datetime
from io import BytesIO
from typing import BinaryIO
from uuid import uuid4

import boto3
from botocore.config import Config

from .config import get_settings
from .records.models import utcnow

# Leading bytes of the accepted image formats
IMAGE_SIGNATURES: dict[str, tuple[bytes, ...]] = {
    "image/jpeg": (b"\xff\xd8\xff",),
    "image/png": (b"\x89PNG",),
    "image/gif": (b"GIF87a", b"GIF89a"),
    "image/webp": (b"RIFF",),
}

IMAGE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


def detect_image_type(data: bytes) -> str | None:
    """Identify an image by its magic number.

    Args:
        data: Raw file content

    Returns:
        MIME type, or None if the content is not an accepted image
    """
    if len(data) < 4:
        return None
    for content_type, signatures in IMAGE_SIGNATURES.items():
        if any(data.startswith(sig) for sig in signatures):
            # RIFF containers are only accepted when they hold WEBP data
            if content_type == "image/webp" and data[8:12] != b"WEBP":
                continue
            return content_type
    return None


class StorageClient:
    """S3-compatible storage client for photo uploads.

    Supports MinIO for local development and AWS S3 for production.
    """

    def __init__(self):
        settings = get_settings()
        self._client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            region_name=settings.s3_region,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"},
            ),
        )
        self._bucket = settings.s3_bucket
        self._public_url = (
            settings.s3_public_url or f"{settings.s3_endpoint}/{settings.s3_bucket}"
        ).rstrip("/")

    def upload_file(
        self,
        data: bytes | BinaryIO,
        key: str,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> str:
        """Upload a file to storage.

        Args:
            data: File content as bytes or file-like object
            key: S3 key (path within bucket)
            content_type: MIME type of the content
            metadata: Optional metadata to attach to the object

        Returns:
            Full S3 path (s3://bucket/key)
        """
        if isinstance(data, bytes):
            data = BytesIO(data)

        extra_args = {"ContentType": content_type}
        if metadata:
            extra_args["Metadata"] = metadata

        self._client.upload_fileobj(
            data,
            self._bucket,
            key,
            ExtraArgs=extra_args,
        )

        return f"s3://{self._bucket}/{key}"

    def public_url(self, key: str) -> str:
        """Public HTTP URL of a stored object."""
        return f"{self._public_url}/{key}"


def compute_content_hash(data: bytes) -> str:
    """Compute SHA-256 hash of content."""
    return hashlib.sha256(data).hexdigest()


def generate_photo_key(
    user_id: str,
    content_type: str,
    timestamp: datetime | None = None,
) -> str:
    """Generate a storage key for an uploaded photo.

    Format: photos/{year-month}/{user_id}/{uuid}.{extension}
    """
    if timestamp is None:
        timestamp = utcnow()

    year_month = timestamp.strftime("%Y-%m")
    safe_user = user_id.replace("/", "_").replace("\\", "_")
    extension = IMAGE_EXTENSIONS.get(content_type, "bin")

    return f"photos/{year_month}/{safe_user}/{uuid4().hex}.{extension}"


def store_photo(storage: StorageClient, user_id: str, data: bytes, content_type: str) -> str:
    """Upload a validated photo and return its public URL."""
    key = generate_photo_key(user_id, content_type)
    storage.upload_file(
        data,
        key,
        content_type,
        metadata={"user_id": user_id, "content_hash": compute_content_hash(data)},
    )
    return storage.public_url(key)


# Singleton instance
_storage_client: StorageClient | None = None


def get_storage() -> StorageClient:
    """Get the storage client singleton."""
    global _storage_client
    if _storage_client is None:
        _storage_client = StorageClient()
    return _storage_client
