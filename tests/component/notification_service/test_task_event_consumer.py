"""
Task Event Consumer Component Tests

Explicit start/stop of the subscription and delivery through the mock bus.
"""
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from core.config import PlatformConfig
from core.config.event_config import EventBusConfig
from microservices.notification_service.events.handlers import TaskEventDispatcher
from microservices.notification_service.main import create_app
from microservices.notification_service.protocols import NotificationServiceError
from microservices.notification_service.task_event_consumer import TaskEventConsumer
from microservices.task_service.events.models import TaskEventType
from tests.fixtures import make_task_event_payload

pytestmark = [pytest.mark.component]

CONFIG = EventBusConfig(task_events_topic="task-events", consumer_group="notification-group", drain_timeout=5.0)


@pytest.fixture
def created_handler():
    return AsyncMock()


@pytest.fixture
def consumer(mock_event_bus, created_handler):
    dispatcher = TaskEventDispatcher({TaskEventType.CREATED: created_handler})
    return TaskEventConsumer(mock_event_bus, dispatcher, CONFIG)


@pytest.mark.asyncio
class TestConsumerLifecycle:

    async def test_start_subscribes_group_to_topic(self, consumer, mock_event_bus):
        workers = await consumer.start()

        assert workers == 1
        assert ("task-events", "notification-group") in mock_event_bus.subscriptions
        assert consumer.is_running

    async def test_delivered_messages_reach_dispatcher(self, consumer, mock_event_bus, created_handler):
        await consumer.start()

        await mock_event_bus.deliver("task-events", make_task_event_payload(task_id=42))

        created_handler.assert_awaited_once()
        assert created_handler.await_args.args[0].task_id == 42

    async def test_bad_message_does_not_break_delivery(self, consumer, mock_event_bus, created_handler):
        await consumer.start()

        await mock_event_bus.deliver("task-events", b"{broken")
        await mock_event_bus.deliver("task-events", make_task_event_payload())

        created_handler.assert_awaited_once()

    async def test_double_start_rejected(self, consumer):
        await consumer.start()

        with pytest.raises(NotificationServiceError):
            await consumer.start()

    async def test_stop_drains_with_configured_timeout(self, consumer, mock_event_bus):
        await consumer.start()

        await consumer.stop()

        assert mock_event_bus.closed
        assert mock_event_bus.drain_timeout == 5.0
        assert not consumer.is_running

    async def test_stop_without_start_is_noop(self, consumer, mock_event_bus):
        await consumer.stop()

        assert not mock_event_bus.closed


class TestNotificationApp:

    def test_lifespan_starts_and_drains_consumer(self, consumer, mock_event_bus):
        app = create_app(PlatformConfig(service_name="notification_service"), consumer=consumer)

        with TestClient(app) as client:
            body = client.get("/health").json()
            assert body["consuming"] is True

        assert mock_event_bus.closed
