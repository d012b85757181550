"""
Task Service Business Logic Layer

Task CRUD with lifecycle events. The store call commits first; the event is
published afterwards and a publish failure never fails or rolls back the
mutation. It is logged so operators can detect drift between the store and
the event stream.
"""

import logging
from typing import List, Optional

from .events.models import TaskEventType
from .events.publishers import TaskEventPublisher
from .models import TaskCreateRequest, TaskResponse, TaskUpdateRequest
from .protocols import (
    EventPublishError,
    TaskNotFoundError,
    TaskRepositoryProtocol,
    TaskValidationError,
)

logger = logging.getLogger(__name__)


class TaskService:
    """Task service business logic layer"""

    def __init__(
        self,
        repository: TaskRepositoryProtocol,
        event_publisher: Optional[TaskEventPublisher] = None,
    ):
        """
        Args:
            repository: Task store
            event_publisher: Lifecycle event publisher (None disables events)
        """
        self.repository = repository
        self.event_publisher = event_publisher

    # ====================
    # Queries
    # ====================

    async def get_task(self, task_id: int) -> TaskResponse:
        task = await self.repository.get_task_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task not found with id: {task_id}", task_id=task_id)
        return task

    async def list_tasks(self, limit: int = 100, offset: int = 0) -> List[TaskResponse]:
        return await self.repository.list_tasks(limit=limit, offset=offset)

    async def list_tasks_by_status(self, status: str) -> List[TaskResponse]:
        return await self.repository.list_tasks_by_status(status)

    async def search_tasks(self, keyword: str) -> List[TaskResponse]:
        if not keyword or not keyword.strip():
            return []
        return await self.repository.search_tasks(keyword.strip())

    # ====================
    # Mutations
    # ====================

    async def create_task(self, request: TaskCreateRequest) -> TaskResponse:
        """Create a task, then emit CREATED with the assigned id"""
        task_data = {
            "title": self._validated_title(request.title),
            "description": request.description,
            "status": request.status,
        }

        task = await self.repository.create_task(task_data)
        logger.info(f"Task created: {task.id}")

        await self._publish_event(task, TaskEventType.CREATED)
        return task

    async def update_task(self, task_id: int, request: TaskUpdateRequest) -> TaskResponse:
        """Apply the fields present in the request, then emit UPDATED"""
        updates = request.model_dump(exclude_unset=True)
        if "title" in updates:
            updates["title"] = self._validated_title(updates["title"])
        if "status" in updates and updates["status"] is None:
            raise TaskValidationError("status must not be null", field="status")

        if not updates:
            # Nothing to change; still report a missing task
            return await self.get_task(task_id)

        task = await self.repository.update_task(task_id, updates)
        if task is None:
            raise TaskNotFoundError(f"Task not found with id: {task_id}", task_id=task_id)
        logger.info(f"Task updated: {task_id} fields={sorted(updates)}")

        await self._publish_event(task, TaskEventType.UPDATED)
        return task

    async def replace_task(self, task_id: int, request: TaskCreateRequest) -> TaskResponse:
        """
        Overwrite title, description and status, then emit UPDATED.

        Fields left out of the request take their create defaults, so an
        omitted description is cleared.
        """
        return await self.update_task(
            task_id,
            TaskUpdateRequest(
                title=request.title,
                description=request.description,
                status=request.status,
            ),
        )

    async def delete_task(self, task_id: int) -> TaskResponse:
        """
        Delete a task, then emit DELETED with the pre-deletion snapshot.

        Attachments are not removed here; see AttachmentService.

        Returns:
            The snapshot of the task as it was before deletion
        """
        snapshot = await self.get_task(task_id)

        deleted = await self.repository.delete_task(task_id)
        if not deleted:
            raise TaskNotFoundError(f"Task not found with id: {task_id}", task_id=task_id)
        logger.info(f"Task deleted: {task_id}")

        await self._publish_event(snapshot, TaskEventType.DELETED)
        return snapshot

    # ====================
    # Helpers
    # ====================

    async def _publish_event(self, task: TaskResponse, event_type: TaskEventType):
        if self.event_publisher is None:
            return
        try:
            await self.event_publisher.publish(task, event_type)
        except EventPublishError as e:
            # Mutation is already committed; the caller still gets success
            logger.error(
                f"Event not published for committed {event_type.value} of task {task.id}: {e}"
            )

    @staticmethod
    def _validated_title(title: Optional[str]) -> str:
        if title is None or not title.strip():
            raise TaskValidationError("title must not be blank", field="title")
        return title
