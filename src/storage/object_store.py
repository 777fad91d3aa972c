"""Object storage for uploaded pitch-deck files.

Objects are addressed by ``{user_id}/{random_name}.{ext}`` paths in both
the local-filesystem and S3 implementations.
"""

import abc
import uuid
from pathlib import Path, PurePosixPath
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.utils.config import StorageConfig
from src.utils.logger import get_logger

logger = get_logger(__name__)


class StorageError(RuntimeError):
    """Raised when an object cannot be written, read, or removed."""


def build_object_path(user_id: str, filename: str) -> str:
    """Build a unique storage path for a user's upload.

    Args:
        user_id: Owner of the object.
        filename: Original filename, used only for its extension.

    Returns:
        Path of the form ``{user_id}/{random_name}.{ext}``.
    """
    ext = PurePosixPath(filename).suffix.lstrip(".").lower() or "pdf"
    return f"{user_id}/{uuid.uuid4().hex}.{ext}"


class ObjectStore(abc.ABC):
    """Minimal blob store interface used by the API and the pipeline."""

    @abc.abstractmethod
    def upload(self, path: str, data: bytes, content_type: str) -> None:
        """Store ``data`` at ``path``."""

    @abc.abstractmethod
    def download(self, path: str) -> bytes:
        """Return the bytes stored at ``path``."""

    @abc.abstractmethod
    def remove(self, path: str) -> None:
        """Delete the object at ``path``."""


class LocalObjectStore(ObjectStore):
    """Stores objects as files under a base directory.

    Args:
        base_dir: Root directory for all objects.
    """

    def __init__(self, base_dir: str | Path = "data/uploads") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        target = (self.base_dir / path).resolve()
        if not target.is_relative_to(self.base_dir.resolve()):
            raise StorageError(f"Path escapes storage root: {path}")
        return target

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Upload failed for {path}: {exc}") from exc
        logger.info("Stored %d bytes at %s (%s)", len(data), path, content_type)

    def download(self, path: str) -> bytes:
        try:
            return self._resolve(path).read_bytes()
        except OSError as exc:
            raise StorageError(f"Download failed for {path}: {exc}") from exc

    def remove(self, path: str) -> None:
        try:
            self._resolve(path).unlink()
        except FileNotFoundError:
            logger.debug("Nothing to remove at %s", path)
        except OSError as exc:
            raise StorageError(f"Remove failed for {path}: {exc}") from exc


class S3ObjectStore(ObjectStore):
    """Stores objects in an S3 bucket.

    Args:
        bucket: Target bucket name.
        region: AWS region of the bucket.
        client: Pre-built S3 client. Created from the environment if ``None``.
    """

    def __init__(
        self, bucket: str, region: str = "us-east-1", client: Any | None = None
    ) -> None:
        self.bucket = bucket
        self.s3 = client or boto3.client("s3", region_name=region)

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        try:
            self.s3.put_object(
                Bucket=self.bucket, Key=path, Body=data, ContentType=content_type
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 upload failed for {path}: {exc}") from exc
        logger.info("Uploaded %d bytes to s3://%s/%s", len(data), self.bucket, path)

    def download(self, path: str) -> bytes:
        try:
            response = self.s3.get_object(Bucket=self.bucket, Key=path)
            return response["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 download failed for {path}: {exc}") from exc

    def remove(self, path: str) -> None:
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=path)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 remove failed for {path}: {exc}") from exc


def build_object_store(config: StorageConfig) -> ObjectStore:
    """Create the object store selected by configuration."""
    if config.type.lower() == "s3":
        return S3ObjectStore(bucket=config.bucket, region=config.region)
    return LocalObjectStore(config.base_dir)
