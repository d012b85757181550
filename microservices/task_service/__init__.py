"""
Task Service Package

Task CRUD, lifecycle events and file attachments
"""

from .attachment_service import AttachmentService
from .task_service import TaskService

__version__ = "1.0.0"
__all__ = [
    "TaskService",
    "AttachmentService",
]
