"""
Event Handlers for Notification Service

Dispatches task lifecycle events by kind. Dispatch never raises: parse
failures, unknown kinds and handler failures are logged and reported as an
outcome, and the caller acknowledges the message in every case.
"""

import logging
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional

from ..protocols import NotificationSenderProtocol
from .models import (
    TaskEvent,
    TaskEventDeserializationError,
    TaskEventType,
    parse_task_event,
)

logger = logging.getLogger(__name__)

TaskEventHandler = Callable[[TaskEvent], Awaitable[None]]


class DispatchOutcome(str, Enum):
    """Terminal state of one delivered message"""
    HANDLED = "handled"
    PARSE_FAILED = "parse_failed"
    UNKNOWN_KIND = "unknown_kind"
    HANDLER_FAILED = "handler_failed"


class TaskNotificationHandlers:
    """
    Default per-kind handlers.

    They log the event and, when a sender is configured, forward a short
    notification through it.
    """

    def __init__(self, sender: Optional[NotificationSenderProtocol] = None):
        self.sender = sender

    async def handle_task_created(self, event: TaskEvent):
        logger.info(f"Processing CREATED event for task: {event.title}")
        await self._notify(event, "New task created", f"Task '{event.title}' was created.")

    async def handle_task_updated(self, event: TaskEvent):
        logger.info(f"Processing UPDATED event for task: {event.title}")
        await self._notify(
            event, "Task updated", f"Task '{event.title}' is now {event.status}."
        )

    async def handle_task_deleted(self, event: TaskEvent):
        logger.info(f"Processing DELETED event for task: {event.title}")
        await self._notify(event, "Task deleted", f"Task '{event.title}' was deleted.")

    async def _notify(self, event: TaskEvent, subject: str, body: str):
        if self.sender is None:
            return
        await self.sender.send_task_notification(event, subject, body)

    def handler_map(self) -> Dict[TaskEventType, TaskEventHandler]:
        return {
            TaskEventType.CREATED: self.handle_task_created,
            TaskEventType.UPDATED: self.handle_task_updated,
            TaskEventType.DELETED: self.handle_task_deleted,
        }


class TaskEventDispatcher:
    """Routes a raw task event payload to the handler for its kind"""

    def __init__(self, handlers: Dict[TaskEventType, TaskEventHandler]):
        self.handlers = dict(handlers)

    async def on_event(self, raw: bytes) -> DispatchOutcome:
        try:
            event = parse_task_event(raw)
        except TaskEventDeserializationError as e:
            # Dropped without dead-lettering
            logger.error(f"Discarding unparseable task event ({len(raw)} bytes): {e}")
            return DispatchOutcome.PARSE_FAILED

        logger.info(
            f"Received task event: type={event.event_type} task_id={event.task_id} "
            f"status={event.status} timestamp={event.timestamp.isoformat()}"
        )

        kind = event.kind
        handler = self.handlers.get(kind) if kind is not None else None
        if handler is None:
            logger.warning(f"Unknown event type: {event.event_type}")
            return DispatchOutcome.UNKNOWN_KIND

        try:
            await handler(event)
        except Exception as e:
            logger.error(
                f"Handler for {event.event_type} failed on task {event.task_id}: {e}",
                exc_info=True,
            )
            return DispatchOutcome.HANDLER_FAILED

        return DispatchOutcome.HANDLED

    async def __call__(self, raw: bytes) -> None:
        await self.on_event(raw)


def get_event_handlers(
    sender: Optional[NotificationSenderProtocol] = None,
) -> Dict[TaskEventType, TaskEventHandler]:
    """Kind-to-handler map with the default notification handlers"""
    return TaskNotificationHandlers(sender).handler_map()


__all__ = [
    "DispatchOutcome",
    "TaskEventDispatcher",
    "TaskNotificationHandlers",
    "get_event_handlers",
]
