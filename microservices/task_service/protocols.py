"""
Task Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, BinaryIO, Dict, List, Optional, Protocol, runtime_checkable

# Import only models (no I/O dependencies)
from .models import AttachmentResponse, TaskResponse


# ============================================================================
# Custom Exceptions - defined here to avoid importing repository
# ============================================================================


class TaskNotFoundError(Exception):
    """Task not found error"""
    def __init__(self, message: str = "Task not found", task_id: int = None):
        super().__init__(message)
        self.task_id = task_id


class TaskValidationError(Exception):
    """Task field validation error"""
    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class AttachmentNotFoundError(Exception):
    """Attachment not found error"""
    def __init__(self, message: str = "Attachment not found", attachment_id: int = None):
        super().__init__(message)
        self.attachment_id = attachment_id


class ObjectStorageError(Exception):
    """Object store call failed"""
    def __init__(self, message: str, storage_key: str = None):
        super().__init__(message)
        self.storage_key = storage_key


class EventPublishError(Exception):
    """Broker handoff of a task event failed"""
    def __init__(self, message: str, task_id: int = None, event_type: str = None):
        super().__init__(message)
        self.task_id = task_id
        self.event_type = event_type


# ============================================================================
# Protocol Interfaces
# ============================================================================


@runtime_checkable
class TaskRepositoryProtocol(Protocol):
    """
    Interface for Task Repository.

    The store assigns ids and timestamps; every mutating call returns only
    after the change is committed.
    """

    async def create_task(self, task_data: Dict[str, Any]) -> TaskResponse:
        """Insert a task and return it with id and timestamps"""
        ...

    async def get_task_by_id(self, task_id: int) -> Optional[TaskResponse]:
        """Get task by ID"""
        ...

    async def list_tasks(self, limit: int = 100, offset: int = 0) -> List[TaskResponse]:
        """List all tasks"""
        ...

    async def list_tasks_by_status(self, status: str) -> List[TaskResponse]:
        """List tasks with the given status"""
        ...

    async def search_tasks(self, keyword: str) -> List[TaskResponse]:
        """Case-insensitive title search"""
        ...

    async def update_task(self, task_id: int, updates: Dict[str, Any]) -> Optional[TaskResponse]:
        """Update task fields; None if the task does not exist"""
        ...

    async def delete_task(self, task_id: int) -> bool:
        """Delete a task; False if it did not exist"""
        ...


@runtime_checkable
class AttachmentRepositoryProtocol(Protocol):
    """Interface for attachment metadata storage"""

    async def create_attachment(self, attachment_data: Dict[str, Any]) -> AttachmentResponse:
        ...

    async def get_attachment(self, attachment_id: int) -> Optional[AttachmentResponse]:
        ...

    async def list_attachments(self, task_id: int) -> List[AttachmentResponse]:
        ...

    async def delete_attachment(self, attachment_id: int) -> bool:
        ...


@runtime_checkable
class ObjectStorageProtocol(Protocol):
    """Interface for the attachment object store"""

    async def upload(self, key: str, stream: BinaryIO, size: int, content_type: Optional[str]) -> str:
        """Store an object and return its key"""
        ...

    async def download(self, key: str) -> bytes:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def presigned_url(self, key: str, ttl_seconds: int) -> str:
        ...


@runtime_checkable
class EventBusProtocol(Protocol):
    """Interface for Event Bus - no I/O imports"""

    async def publish(self, topic: str, key: str, payload: bytes) -> None:
        """Publish a keyed message; raises on broker failure"""
        ...


__all__ = [
    # Exceptions
    "TaskNotFoundError",
    "TaskValidationError",
    "AttachmentNotFoundError",
    "ObjectStorageError",
    "EventPublishError",
    # Protocols
    "TaskRepositoryProtocol",
    "AttachmentRepositoryProtocol",
    "ObjectStorageProtocol",
    "EventBusProtocol",
]
