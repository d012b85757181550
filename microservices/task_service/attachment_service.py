"""
Attachment Service

File attachments for tasks. Object bytes live in the object store, metadata
in the attachment repository. Attachments are independent of the task
lifecycle: deleting a task leaves its attachments in place.
"""

import logging
import uuid
from typing import BinaryIO, List, Optional, Tuple

from .models import AttachmentResponse, AttachmentUrlResponse
from .protocols import (
    AttachmentNotFoundError,
    AttachmentRepositoryProtocol,
    ObjectStorageError,
    ObjectStorageProtocol,
    TaskNotFoundError,
    TaskRepositoryProtocol,
    TaskValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_URL_TTL_SECONDS = 3600


def build_storage_key(task_id: int, filename: str) -> str:
    """Object key: ``{task_id}_{uuid}_{filename}``"""
    return f"{task_id}_{uuid.uuid4()}_{filename}"


class AttachmentService:
    """Task attachment business logic"""

    def __init__(
        self,
        task_repository: TaskRepositoryProtocol,
        attachment_repository: AttachmentRepositoryProtocol,
        storage: ObjectStorageProtocol,
        url_ttl_seconds: int = DEFAULT_URL_TTL_SECONDS,
    ):
        self.task_repository = task_repository
        self.attachment_repository = attachment_repository
        self.storage = storage
        self.url_ttl_seconds = url_ttl_seconds

    async def upload_attachment(
        self,
        task_id: int,
        filename: str,
        stream: BinaryIO,
        size: int,
        content_type: Optional[str] = None,
    ) -> AttachmentResponse:
        """
        Store a file for an existing task

        The object is written first; if the metadata insert fails the object
        is removed again so no orphan is left behind.

        Raises:
            TaskNotFoundError: task does not exist
            TaskValidationError: empty filename
            ObjectStorageError: object store failure
        """
        if not filename or not filename.strip():
            raise TaskValidationError("filename must not be blank", field="filename")
        if await self.task_repository.get_task_by_id(task_id) is None:
            raise TaskNotFoundError(f"Task not found with id: {task_id}", task_id=task_id)

        key = await self.storage.upload(
            build_storage_key(task_id, filename), stream, size, content_type
        )
        try:
            attachment = await self.attachment_repository.create_attachment({
                "task_id": task_id,
                "storage_key": key,
                "original_filename": filename,
                "content_type": content_type,
                "size": size,
            })
        except Exception:
            logger.error(f"Attachment metadata insert failed, removing object {key}")
            try:
                await self.storage.delete(key)
            except ObjectStorageError as cleanup_error:
                logger.error(f"Orphaned object {key} left in storage: {cleanup_error}")
            raise

        logger.info(f"Attachment {attachment.id} uploaded for task {task_id}")
        return attachment

    async def list_attachments(self, task_id: int) -> List[AttachmentResponse]:
        return await self.attachment_repository.list_attachments(task_id)

    async def get_attachment(self, task_id: int, attachment_id: int) -> AttachmentResponse:
        attachment = await self.attachment_repository.get_attachment(attachment_id)
        if attachment is None or attachment.task_id != task_id:
            raise AttachmentNotFoundError(
                f"Attachment {attachment_id} not found for task {task_id}",
                attachment_id=attachment_id,
            )
        return attachment

    async def download_attachment(
        self, task_id: int, attachment_id: int
    ) -> Tuple[AttachmentResponse, bytes]:
        """Returns the metadata together with the object bytes"""
        attachment = await self.get_attachment(task_id, attachment_id)
        content = await self.storage.download(attachment.storage_key)
        return attachment, content

    async def get_download_url(self, task_id: int, attachment_id: int) -> AttachmentUrlResponse:
        attachment = await self.get_attachment(task_id, attachment_id)
        url = await self.storage.presigned_url(attachment.storage_key, self.url_ttl_seconds)
        return AttachmentUrlResponse(
            attachment_id=attachment.id,
            url=url,
            expires_in=self.url_ttl_seconds,
        )

    async def delete_attachment(self, task_id: int, attachment_id: int) -> None:
        """Remove the object and its metadata"""
        attachment = await self.get_attachment(task_id, attachment_id)
        try:
            await self.storage.delete(attachment.storage_key)
        except ObjectStorageError as e:
            # Metadata is still removed so the attachment disappears for clients
            logger.warning(f"Object {attachment.storage_key} not removed: {e}")
        await self.attachment_repository.delete_attachment(attachment_id)
        logger.info(f"Attachment {attachment_id} deleted from task {task_id}")


__all__ = ["AttachmentService", "build_storage_key"]
