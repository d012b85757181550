"""
Task service component fixtures
"""
from datetime import datetime

import pytest

from microservices.task_service.attachment_service import AttachmentService
from microservices.task_service.events.publishers import TaskEventPublisher
from microservices.task_service.task_service import TaskService

from .mocks import MockAttachmentRepository, MockObjectStorage, MockTaskRepository

TASK_EVENTS_TOPIC = "task-events"
EVENT_TIME = datetime(2024, 1, 1, 10, 0, 0)


@pytest.fixture
def mock_task_repository() -> MockTaskRepository:
    return MockTaskRepository()


@pytest.fixture
def mock_attachment_repository() -> MockAttachmentRepository:
    return MockAttachmentRepository()


@pytest.fixture
def mock_storage() -> MockObjectStorage:
    return MockObjectStorage()


@pytest.fixture
def event_publisher(mock_event_bus) -> TaskEventPublisher:
    return TaskEventPublisher(mock_event_bus, topic=TASK_EVENTS_TOPIC, clock=lambda: EVENT_TIME)


@pytest.fixture
def task_service(mock_task_repository, event_publisher) -> TaskService:
    return TaskService(repository=mock_task_repository, event_publisher=event_publisher)


@pytest.fixture
def attachment_service(
    mock_task_repository, mock_attachment_repository, mock_storage
) -> AttachmentService:
    return AttachmentService(
        task_repository=mock_task_repository,
        attachment_repository=mock_attachment_repository,
        storage=mock_storage,
        url_ttl_seconds=3600,
    )
