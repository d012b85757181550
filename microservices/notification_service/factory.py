"""
Notification Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that imports I/O-dependent modules.

Usage:
    from .factory import create_task_event_consumer
    consumer = await create_task_event_consumer(settings)
"""
from typing import Optional

from core.config.platform_config import PlatformConfig

from .events.handlers import TaskEventDispatcher, get_event_handlers
from .protocols import EventSubscriberProtocol, NotificationSenderProtocol
from .task_event_consumer import TaskEventConsumer


def create_task_event_dispatcher(
    sender: Optional[NotificationSenderProtocol] = None,
) -> TaskEventDispatcher:
    return TaskEventDispatcher(get_event_handlers(sender))


async def create_task_event_consumer(
    settings: PlatformConfig,
    event_bus: Optional[EventSubscriberProtocol] = None,
    sender: Optional[NotificationSenderProtocol] = None,
) -> TaskEventConsumer:
    """
    Create TaskEventConsumer with real dependencies.

    Connects a NATS event bus unless one is passed in. The consumer is
    returned unstarted.
    """
    if event_bus is None:
        from core.nats_client import create_event_bus

        event_bus = await create_event_bus(settings.events, settings.service_name)
        await event_bus.ensure_topic(settings.events.task_events_topic)

    return TaskEventConsumer(
        event_bus=event_bus,
        dispatcher=create_task_event_dispatcher(sender),
        config=settings.events,
    )


__all__ = [
    "create_task_event_dispatcher",
    "create_task_event_consumer",
]
