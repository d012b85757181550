"""
Task Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that imports I/O-dependent modules.

Usage:
    from .factory import create_task_service
    service = create_task_service(db, event_bus, settings)
"""
from typing import Optional

from core.config.platform_config import PlatformConfig
from core.postgres_client import PostgresClient

from .attachment_service import AttachmentService
from .events.publishers import TaskEventPublisher
from .protocols import EventBusProtocol
from .task_service import TaskService


def create_task_repository(db: PostgresClient):
    from .task_repository import TaskRepository

    return TaskRepository(db)


def create_attachment_repository(db: PostgresClient):
    from .task_repository import AttachmentRepository

    return AttachmentRepository(db)


def create_task_service(
    db: PostgresClient,
    event_bus: Optional[EventBusProtocol],
    settings: PlatformConfig,
) -> TaskService:
    """
    Create TaskService with real dependencies.

    Args:
        db: Connected PostgreSQL client
        event_bus: Broker client; None disables lifecycle events
        settings: Platform configuration

    Returns:
        Configured TaskService instance
    """
    publisher = None
    if event_bus is not None:
        publisher = TaskEventPublisher(event_bus, topic=settings.events.task_events_topic)

    return TaskService(
        repository=create_task_repository(db),
        event_publisher=publisher,
    )


def create_attachment_service(db: PostgresClient, settings: PlatformConfig) -> AttachmentService:
    from .storage_client import MinioObjectStorage

    return AttachmentService(
        task_repository=create_task_repository(db),
        attachment_repository=create_attachment_repository(db),
        storage=MinioObjectStorage(settings.minio),
        url_ttl_seconds=settings.minio.presigned_url_ttl,
    )


__all__ = [
    "create_task_service",
    "create_attachment_service",
    "create_task_repository",
    "create_attachment_repository",
]
