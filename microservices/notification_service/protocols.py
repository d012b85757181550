"""
Notification Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Awaitable, Callable, Protocol, runtime_checkable

from microservices.task_service.events.models import TaskEvent


class NotificationServiceError(Exception):
    """Base exception for notification service errors"""
    pass


@runtime_checkable
class EventSubscriberProtocol(Protocol):
    """Broker client side used by the consumer"""

    async def subscribe(
        self, topic: str, group: str, handler: Callable[[bytes], Awaitable[None]]
    ) -> int:
        """Start delivering messages of topic to handler; returns the worker count"""
        ...

    async def close(self, drain_timeout: float = 30.0) -> None:
        """Stop delivery after in-flight handlers finish"""
        ...


@runtime_checkable
class NotificationSenderProtocol(Protocol):
    """
    Outbound notification channel (email, push, ...).

    Implementations may raise; the dispatcher contains the failure.
    """

    async def send_task_notification(self, event: TaskEvent, subject: str, body: str) -> None:
        ...


__all__ = [
    "NotificationServiceError",
    "EventSubscriberProtocol",
    "NotificationSenderProtocol",
]
