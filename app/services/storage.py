"""
Asset storage for photos, QR codes and certificate PDFs
app/services/storage.py

Two interchangeable backends, selected with STORAGE_TYPE:
- local: files under UPLOAD_DIR, served by the /uploads static mount
- s3: objects in S3_BUCKET_NAME, served through their public URL
"""

import logging
import mimetypes
import uuid
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import Optional

import boto3

from app.config import settings

logger = logging.getLogger(__name__)

PHOTOS = "photos"
QRCODES = "qrcodes"
PDFS = "pdfs"

CATEGORY_PREFIXES = {
    PHOTOS: "photo",
    QRCODES: "qrcode",
    PDFS: "noc",
}


def guess_extension(content_type: str, default: str = "") -> str:
    if content_type in ("image/jpeg", "image/jpg"):
        return ".jpg"
    return mimetypes.guess_extension(content_type or "") or default


def unique_filename(category: str, content_type: str) -> str:
    """
    Builds a collision-free file name for a category.

    Example: photo-0b8f2c7e-....jpg
    """
    prefix = CATEGORY_PREFIXES.get(category, category)
    return f"{prefix}-{uuid.uuid4()}{guess_extension(content_type)}"


class AssetStore(ABC):
    """Persists binary assets and hands back a location reference."""

    @abstractmethod
    def store(self, category: str, data: bytes, content_type: str, filename: str = None) -> str:
        """Saves the bytes and returns their location (path or URL)."""

    @abstractmethod
    def local_path(self, location: str) -> Optional[Path]:
        """
        File backing a location, or None when the asset lives elsewhere
        and must be fetched through its URL.
        """


class LocalAssetStore(AssetStore):
    """Writes assets to disk under base_dir/<category>/."""

    def __init__(self, base_dir: str, url_prefix: str = "/uploads"):
        self.base_dir = Path(base_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def store(self, category: str, data: bytes, content_type: str, filename: str = None) -> str:
        folder = self.base_dir / category
        folder.mkdir(parents=True, exist_ok=True)

        filename = filename or unique_filename(category, content_type)
        file_path = folder / filename
        file_path.write_bytes(data)

        logger.debug(f"Stored {len(data)} bytes at {file_path}")
        return f"{self.url_prefix}/{category}/{filename}"

    def local_path(self, location: str) -> Optional[Path]:
        if not location or not location.startswith(self.url_prefix + "/"):
            return None

        relative = location[len(self.url_prefix) + 1:]
        base = self.base_dir.resolve()
        file_path = (base / relative).resolve()

        # Reject locations that climb out of the upload directory
        if base not in file_path.parents:
            return None
        return file_path


class S3AssetStore(AssetStore):
    """Uploads assets to an S3 bucket under <category>/ key prefixes."""

    def __init__(self, bucket: str, region: str, client=None, public_base_url: str = None):
        self.bucket = bucket
        self.region = region
        self.client = client or boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
        self.public_base_url = (
            public_base_url or f"https://{bucket}.s3.{region}.amazonaws.com"
        ).rstrip("/")

    def store(self, category: str, data: bytes, content_type: str, filename: str = None) -> str:
        key = f"{category}/{filename or unique_filename(category, content_type)}"

        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )

        logger.debug(f"Uploaded {len(data)} bytes to s3://{self.bucket}/{key}")
        return f"{self.public_base_url}/{key}"

    def local_path(self, location: str) -> Optional[Path]:
        return None


def build_asset_store(current=None) -> AssetStore:
    """Instantiates the backend named by STORAGE_TYPE."""
    current = current or settings

    if current.storage_type == "s3":
        if not current.s3_bucket_name:
            raise ValueError("S3_BUCKET_NAME is required when STORAGE_TYPE=s3")
        return S3AssetStore(
            bucket=current.s3_bucket_name,
            region=current.s3_region,
            public_base_url=current.s3_public_base_url,
        )

    if current.storage_type == "local":
        return LocalAssetStore(current.upload_dir)

    raise ValueError(f"Unknown STORAGE_TYPE: {current.storage_type}")


@lru_cache()
def get_asset_store() -> AssetStore:
    """
    FastAPI dependency: one store per process
    """
    store = build_asset_store()
    logger.info(f"📁 Asset store: {type(store).__name__}")
    return store
