"""
Event Data Models for Notification Service

Inbound task lifecycle events. The wire schema is owned by task_service and
shared here; this module adds the consumer-side parsing.
"""

from pydantic import ValidationError

from microservices.task_service.events.models import TaskEvent, TaskEventType


class TaskEventDeserializationError(Exception):
    """Payload is not a valid task event"""

    def __init__(self, message: str, payload: bytes = b""):
        super().__init__(message)
        self.payload = payload


def parse_task_event(raw: bytes) -> TaskEvent:
    """
    Parse a task event payload.

    Unknown fields are ignored and unknown event kinds are accepted; only
    structurally invalid payloads are rejected.

    Raises:
        TaskEventDeserializationError: invalid JSON or missing/invalid fields
    """
    try:
        return TaskEvent.from_bytes(raw)
    except (ValidationError, ValueError, TypeError) as e:
        raise TaskEventDeserializationError(f"Invalid task event: {e}", payload=raw) from e


__all__ = [
    "TaskEvent",
    "TaskEventType",
    "TaskEventDeserializationError",
    "parse_task_event",
]
