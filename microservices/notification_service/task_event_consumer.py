"""
Task Event Consumer

Subscribes the dispatcher to the task events topic as a member of the
configured consumer group. Start and stop are explicit; stop waits for
in-flight handlers before releasing the connection.
"""

import logging

from core.config.event_config import EventBusConfig

from .events.handlers import TaskEventDispatcher
from .protocols import EventSubscriberProtocol, NotificationServiceError

logger = logging.getLogger(__name__)


class TaskEventConsumer:
    """Lifecycle owner of the task events subscription"""

    def __init__(
        self,
        event_bus: EventSubscriberProtocol,
        dispatcher: TaskEventDispatcher,
        config: EventBusConfig,
    ):
        self.event_bus = event_bus
        self.dispatcher = dispatcher
        self.config = config
        self._started = False

    @property
    def is_running(self) -> bool:
        return self._started

    async def start(self) -> int:
        """
        Begin consuming.

        Returns:
            Number of partition workers started

        Raises:
            NotificationServiceError: consumer already started
        """
        if self._started:
            raise NotificationServiceError("Task event consumer already started")

        workers = await self.event_bus.subscribe(
            self.config.task_events_topic,
            self.config.consumer_group,
            self.dispatcher.on_event,
        )
        self._started = True
        logger.info(
            f"Consuming {self.config.task_events_topic} as {self.config.consumer_group} "
            f"({workers} partition workers)"
        )
        return workers

    async def stop(self):
        """Drain in-flight handlers and close the subscription; safe to call twice"""
        if not self._started:
            return
        self._started = False
        logger.info(f"Draining task event consumer (timeout {self.config.drain_timeout}s)")
        await self.event_bus.close(drain_timeout=self.config.drain_timeout)
        logger.info("Task event consumer stopped")


__all__ = ["TaskEventConsumer"]
