"""
File storage buckets on an S3-compatible object store (MinIO)

The MinIO client is synchronous; every call runs in a worker thread.
"""

from dataclasses import dataclass
from io import BytesIO
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, List, Optional
import asyncio
import json
import structlog

from minio import Minio
from minio.error import S3Error

from igreja.core.config import Settings
from igreja.core.errors import BackendError, NotFoundError

if TYPE_CHECKING:
    from igreja.backend.service import HostedBackend

logger = structlog.get_logger(__name__)

MISSING_OBJECT_CODES = ("NoSuchKey", "NoSuchObject")


def _public_read_policy(bucket: str) -> dict:
    return {
        "Version": "2012-10-17",
        "Statement": [{
            "Effect": "Allow",
            "Principal": {"AWS": ["*"]},
            "Action": ["s3:GetObject"],
            "Resource": [f"arn:aws:s3:::{bucket}/*"],
        }],
    }


def create_object_store(settings: Settings) -> Minio:
    """MinIO client from settings (no connection is made until the first call)"""
    return Minio(
        endpoint=settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_USE_SSL,
        region=settings.MINIO_REGION,
    )


@dataclass
class FileObject:
    """File handed over by the presentation layer for upload"""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        suffix = PurePosixPath(self.filename).suffix.lstrip(".").lower()
        return suffix or "bin"


def _storage_error(e: S3Error, bucket: str, path: str) -> BackendError:
    if e.code in MISSING_OBJECT_CODES:
        return NotFoundError("Object not found", details=f"{bucket}/{path}")
    if e.code == "NoSuchBucket":
        return BackendError("Bucket not found", code="404", details=bucket)
    return BackendError(f"Storage error: {e.code}", code="500", details=f"{bucket}/{path}")


class StorageBucket:
    """Objects of one bucket"""

    def __init__(self, backend: "HostedBackend", bucket: str):
        self.backend = backend
        self.bucket = bucket

    @property
    def store(self) -> Minio:
        return self.backend.object_store

    def _key(self, path: str) -> str:
        key = PurePosixPath(path)
        if not path or key.is_absolute() or ".." in key.parts:
            raise BackendError(f"Invalid key: {path}", code="400")
        return str(key)

    def _exists(self, key: str) -> bool:
        try:
            self.store.stat_object(bucket_name=self.bucket, object_name=key)
        except S3Error as e:
            if e.code in MISSING_OBJECT_CODES:
                return False
            raise _storage_error(e, self.bucket, key) from e
        return True

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
        upsert: bool = False,
    ) -> str:
        """Store data at path; without upsert an existing object is an error"""
        key = self._key(path)

        def _upload():
            if not upsert and self._exists(key):
                raise BackendError("The resource already exists", code="409")
            try:
                self.store.put_object(
                    bucket_name=self.bucket,
                    object_name=key,
                    data=BytesIO(data),
                    length=len(data),
                    content_type=content_type or "application/octet-stream",
                )
            except S3Error as e:
                logger.error("Storage upload failed", bucket=self.bucket, path=key, error=e.code)
                raise _storage_error(e, self.bucket, key) from e

        await asyncio.to_thread(_upload)
        logger.info("Object stored", bucket=self.bucket, path=key, size=len(data), content_type=content_type)
        return key

    async def download(self, path: str) -> bytes:
        key = self._key(path)

        def _download() -> bytes:
            response = None
            try:
                response = self.store.get_object(bucket_name=self.bucket, object_name=key)
                return response.read()
            except S3Error as e:
                raise _storage_error(e, self.bucket, key) from e
            finally:
                if response is not None:
                    response.close()
                    response.release_conn()

        return await asyncio.to_thread(_download)

    async def remove(self, paths: List[str]) -> List[str]:
        """Delete objects; paths that do not exist are skipped"""
        keys = [self._key(path) for path in paths]

        def _remove() -> List[str]:
            removed = []
            for key in keys:
                if not self._exists(key):
                    continue
                try:
                    self.store.remove_object(bucket_name=self.bucket, object_name=key)
                except S3Error as e:
                    raise _storage_error(e, self.bucket, key) from e
                removed.append(key)
            return removed

        removed = await asyncio.to_thread(_remove)
        logger.info("Objects removed", bucket=self.bucket, paths=removed)
        return removed

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(self._exists, self._key(path))

    def get_public_url(self, path: str) -> str:
        base = self.backend.settings.STORAGE_PUBLIC_URL.rstrip("/")
        return f"{base}/{self.bucket}/{path}"


class StorageClient:
    """Entry point to the buckets"""

    def __init__(self, backend: "HostedBackend"):
        self.backend = backend

    def from_(self, bucket: str) -> StorageBucket:
        return StorageBucket(self.backend, bucket)

    async def ensure_buckets_exist(self, buckets: List[str]):
        """Create missing buckets; called on application startup"""

        def _create_bucket_if_not_exists(bucket: str):
            try:
                if not self.backend.object_store.bucket_exists(bucket):
                    self.backend.object_store.make_bucket(bucket)
                    self.backend.object_store.set_bucket_policy(bucket, json.dumps(_public_read_policy(bucket)))
                    logger.info("Bucket created", bucket=bucket)
            except S3Error as e:
                logger.error("Bucket creation failed", bucket=bucket, error=e.code)
                raise BackendError(f"Failed to create bucket {bucket}", code="500") from e

        for bucket in buckets:
            await asyncio.to_thread(_create_bucket_if_not_exists, bucket)
