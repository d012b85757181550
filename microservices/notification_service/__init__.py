"""
Notification Service Package

Task event consumer and notification handlers
"""

from .events.handlers import DispatchOutcome, TaskEventDispatcher, TaskNotificationHandlers
from .task_event_consumer import TaskEventConsumer

__version__ = "1.0.0"
__all__ = [
    "DispatchOutcome",
    "TaskEventDispatcher",
    "TaskNotificationHandlers",
    "TaskEventConsumer",
]
