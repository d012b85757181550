"""
Attachment object store on MinIO (S3 compatible).

The minio SDK is blocking; calls are moved off the event loop with
asyncio.to_thread.
"""

import asyncio
import logging
from datetime import timedelta
from typing import BinaryIO, Optional

from minio import Minio
from minio.error import S3Error
from urllib3.exceptions import HTTPError

from core.config.infra_config import MinIOConfig

from .protocols import ObjectStorageError

logger = logging.getLogger(__name__)

# S3 error responses, plus transport failures when MinIO is unreachable
STORAGE_ERRORS = (S3Error, HTTPError, OSError)


class MinioObjectStorage:
    """Object store for task attachments"""

    def __init__(self, config: MinIOConfig, client: Optional[Minio] = None):
        self.config = config
        self.bucket_name = config.bucket
        self.client = client or Minio(
            config.endpoint,
            access_key=config.access_key,
            secret_key=config.secret_key,
            secure=config.secure,
        )
        self._bucket_ready = False

    async def ensure_bucket(self):
        """Create the attachment bucket if it does not exist"""
        if self._bucket_ready:
            return
        try:
            exists = await asyncio.to_thread(self.client.bucket_exists, self.bucket_name)
            if not exists:
                await asyncio.to_thread(self.client.make_bucket, self.bucket_name)
                logger.info(f"Created MinIO bucket: {self.bucket_name}")
            else:
                logger.info(f"MinIO bucket exists: {self.bucket_name}")
        except STORAGE_ERRORS as e:
            raise ObjectStorageError(f"Failed to ensure bucket {self.bucket_name}: {e}") from e
        self._bucket_ready = True

    async def upload(
        self, key: str, stream: BinaryIO, size: int, content_type: Optional[str]
    ) -> str:
        await self.ensure_bucket()
        try:
            await asyncio.to_thread(
                self.client.put_object,
                self.bucket_name,
                key,
                stream,
                size,
                content_type=content_type or "application/octet-stream",
            )
        except STORAGE_ERRORS as e:
            raise ObjectStorageError(f"Failed to upload {key}: {e}", storage_key=key) from e
        logger.info(f"Uploaded object {key} ({size} bytes)")
        return key

    async def download(self, key: str) -> bytes:
        try:
            return await asyncio.to_thread(self._read_object, key)
        except STORAGE_ERRORS as e:
            raise ObjectStorageError(f"Failed to download {key}: {e}", storage_key=key) from e

    def _read_object(self, key: str) -> bytes:
        response = self.client.get_object(self.bucket_name, key)
        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self.client.remove_object, self.bucket_name, key)
        except STORAGE_ERRORS as e:
            raise ObjectStorageError(f"Failed to delete {key}: {e}", storage_key=key) from e
        logger.info(f"Deleted object {key}")

    async def presigned_url(self, key: str, ttl_seconds: int) -> str:
        try:
            return await asyncio.to_thread(
                self.client.presigned_get_object,
                self.bucket_name,
                key,
                expires=timedelta(seconds=ttl_seconds),
            )
        except STORAGE_ERRORS as e:
            raise ObjectStorageError(f"Failed to presign {key}: {e}", storage_key=key) from e


__all__ = ["MinioObjectStorage", "STORAGE_ERRORS"]
