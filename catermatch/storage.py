"""
File asset storage on Cloudflare R2.

Logical buckets (events, profiles, portfolio, chats) each map to their own R2
bucket. The first three are public and addressed through
``R2_PUBLIC_BASE_URL``; chat attachments are private and only handed out as
presigned URLs.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import (
    R2_ACCESS_KEY_ID,
    R2_ACCOUNT_ID,
    R2_BUCKET_CHATS,
    R2_BUCKET_EVENTS,
    R2_BUCKET_PORTFOLIO,
    R2_BUCKET_PROFILES,
    R2_PUBLIC_BASE_URL,
    R2_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)

EVENTS_BUCKET = "events"
PROFILES_BUCKET = "profiles"
PORTFOLIO_BUCKET = "portfolio"
CHATS_BUCKET = "chats"

BUCKETS = {
    EVENTS_BUCKET: R2_BUCKET_EVENTS,
    PROFILES_BUCKET: R2_BUCKET_PROFILES,
    PORTFOLIO_BUCKET: R2_BUCKET_PORTFOLIO,
    CHATS_BUCKET: R2_BUCKET_CHATS,
}

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600

# Allowed image types for photos, logos and portfolio items
ALLOWED_IMAGE_TYPES = [
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/gif",
    "image/heic",
    "image/heif",
    "image/avif",
]
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB
MAX_ATTACHMENT_SIZE = 20 * 1024 * 1024  # 20MB

DANGEROUS_FILENAME_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]


class StorageError(Exception):
    """Upload, listing, signing or removal against R2 failed"""


@dataclass
class FilePayload:
    """An uploaded file, already read into memory and validated"""

    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
        region_name="auto",
    )


def safe_filename(filename: Optional[str]) -> str:
    """
    Reduce an uploaded filename to a safe basename.

    Raises:
        ValueError: If the name is empty, too long or contains traversal characters
    """
    if not filename:
        raise ValueError("Missing filename")
    name = os.path.basename(filename.strip())
    if name != filename.strip():
        raise ValueError("Invalid filename")
    for char in DANGEROUS_FILENAME_CHARS:
        if char in name:
            raise ValueError(f"Invalid filename - contains dangerous character '{char}'")
    if len(name) > 255:
        raise ValueError("Filename too long - maximum 255 characters")
    return name


class FileAssetClient:
    """upload / list_files / public_url / signed_url / remove over logical buckets"""

    def __init__(self, client=None, public_base_url: str = R2_PUBLIC_BASE_URL):
        self._client = client
        self.public_base_url = public_base_url.rstrip("/")

    @property
    def client(self):
        if self._client is None:
            self._client = get_r2_client()
        return self._client

    @staticmethod
    def bucket_name(bucket: str) -> str:
        name = BUCKETS.get(bucket)
        if name is None:
            raise StorageError(f"Unknown bucket: {bucket}")
        return name

    def upload(self, bucket: str, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Store ``data`` at ``path``; returns the path"""
        params = {"Bucket": self.bucket_name(bucket), "Key": path, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        try:
            self.client.put_object(**params)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"❌ Upload to {bucket}/{path} failed: {e}")
            raise StorageError(f"Upload failed: {e}") from e
        logger.info(f"📤 Uploaded {len(data)} bytes to {bucket}/{path}")
        return path

    def list_files(self, bucket: str, prefix: str = "", limit: int = 100) -> list[dict]:
        """List up to ``limit`` objects under ``prefix``"""
        try:
            response = self.client.list_objects_v2(
                Bucket=self.bucket_name(bucket), Prefix=prefix, MaxKeys=limit
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"❌ Listing {bucket}/{prefix} failed: {e}")
            raise StorageError(f"List failed: {e}") from e
        return [
            {
                "name": item["Key"],
                "size": item.get("Size"),
                "last_modified": item.get("LastModified"),
            }
            for item in response.get("Contents", [])
        ]

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{self.bucket_name(bucket)}/{path}"

    def signed_url(self, bucket: str, path: str, ttl_seconds: int = PRESIGNED_URL_EXPIRATION) -> str:
        """Generate a presigned GET URL valid for ``ttl_seconds``"""
        params = {"Bucket": self.bucket_name(bucket), "Key": path}
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params=params,
                ExpiresIn=ttl_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"❌ Failed to generate presigned URL for {bucket}/{path}: {e}")
            raise StorageError(f"Signing failed: {e}") from e

    def remove(self, bucket: str, paths: list[str]) -> None:
        if not paths:
            return
        try:
            self.client.delete_objects(
                Bucket=self.bucket_name(bucket),
                Delete={"Objects": [{"Key": p} for p in paths], "Quiet": True},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"❌ Removing {len(paths)} object(s) from {bucket} failed: {e}")
            raise StorageError(f"Remove failed: {e}") from e
        logger.info(f"🗑️ Removed {len(paths)} object(s) from {bucket}")


def get_file_assets() -> FileAssetClient:
    """Dependency injection for FileAssetClient"""
    return FileAssetClient()
