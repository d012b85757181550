"""
Event handlers for Notification Service
"""

from .handlers import (
    DispatchOutcome,
    TaskEventDispatcher,
    TaskNotificationHandlers,
    get_event_handlers,
)
from .models import TaskEventDeserializationError, parse_task_event

__all__ = [
    "DispatchOutcome",
    "TaskEventDispatcher",
    "TaskNotificationHandlers",
    "get_event_handlers",
    "TaskEventDeserializationError",
    "parse_task_event",
]
