"""
Task Service Events

Standard Structure:
- models.py: Event data models (Pydantic), the shared wire schema
- publishers.py: Event publishers (publish events to other services)
"""

# Event Models
from .models import TaskEvent, TaskEventType, create_task_event

# Event Publishers
from .publishers import TaskEventPublisher

__all__ = [
    # Event Models
    "TaskEvent",
    "TaskEventType",
    "create_task_event",
    # Event Publishers
    "TaskEventPublisher",
]
