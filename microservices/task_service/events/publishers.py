"""
Task Service Event Publishers

Publishes task lifecycle events. Callers invoke the publisher only after the
store mutation has been committed; a publish failure is raised as
EventPublishError and never retried here.
"""

import logging
from datetime import datetime
from typing import Callable

from ..models import TaskResponse
from ..protocols import EventBusProtocol, EventPublishError
from .models import TaskEvent, TaskEventType, create_task_event

logger = logging.getLogger(__name__)


class TaskEventPublisher:
    """
    Task event publisher

    Events are keyed by the task id so the broker keeps per-task order.
    """

    def __init__(
        self,
        event_bus: EventBusProtocol,
        topic: str,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            event_bus: Broker client with publish(topic, key, payload)
            topic: Task events topic name
            clock: Source of the emission timestamp (local time)
        """
        self.event_bus = event_bus
        self.topic = topic
        self._clock = clock

    async def publish(self, task: TaskResponse, event_type: TaskEventType) -> TaskEvent:
        """
        Publish one event for a committed task mutation

        Args:
            task: Task snapshot (post-mutation, or pre-deletion for DELETED)
            event_type: Mutation kind

        Returns:
            The event that was handed to the broker

        Raises:
            EventPublishError: broker handoff failed
        """
        event = create_task_event(task, event_type, timestamp=self._clock())

        try:
            await self.event_bus.publish(self.topic, str(event.task_id), event.to_bytes())
        except Exception as e:
            raise EventPublishError(
                f"Failed to publish {event.event_type} event for task {event.task_id}: {e}",
                task_id=event.task_id,
                event_type=event.event_type,
            ) from e

        logger.info(f"Published {event.event_type} event for task {event.task_id} to {self.topic}")
        return event

    async def publish_created(self, task: TaskResponse) -> TaskEvent:
        return await self.publish(task, TaskEventType.CREATED)

    async def publish_updated(self, task: TaskResponse) -> TaskEvent:
        return await self.publish(task, TaskEventType.UPDATED)

    async def publish_deleted(self, task: TaskResponse) -> TaskEvent:
        """Publish with the snapshot taken before the task was removed"""
        return await self.publish(task, TaskEventType.DELETED)


__all__ = [
    "TaskEventPublisher",
]
