"""
Task Service Event Data Models

Wire schema of the task lifecycle event shared by task_service (producer)
and notification_service (consumer).

NATS topic: task-events (keyed by task id)
Subscribers: notification_service
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import TaskResponse


class TaskEventType(str, Enum):
    """Known event kinds"""
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"


class TaskEvent(BaseModel):
    """
    Task lifecycle event

    Serialized with camelCase field names. ``eventType`` stays a plain string
    so kinds a consumer does not know yet still deserialize; unknown extra
    fields are ignored. ``timestamp`` is a local time without zone, set when
    the event is built, and is informational only.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    task_id: int = Field(..., alias="taskId")
    title: str
    description: Optional[str] = None
    status: str
    event_type: str = Field(..., alias="eventType")
    timestamp: datetime

    @property
    def kind(self) -> Optional[TaskEventType]:
        """Known event kind, or None for kinds this code does not know"""
        try:
            return TaskEventType(self.event_type)
        except ValueError:
            return None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    def to_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "TaskEvent":
        """Parse a wire payload; raises pydantic.ValidationError on bad input"""
        return cls.model_validate_json(raw)


def create_task_event(
    task: TaskResponse,
    event_type: TaskEventType,
    timestamp: datetime,
) -> TaskEvent:
    """Build an event from a task snapshot"""
    return TaskEvent(
        task_id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        event_type=event_type.value,
        timestamp=timestamp,
    )


__all__ = [
    "TaskEventType",
    "TaskEvent",
    "create_task_event",
]
