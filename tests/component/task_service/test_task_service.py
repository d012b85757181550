"""
Task Service Component Tests

TaskService with a mocked store and event bus: CRUD semantics, the
lifecycle event emitted after each committed mutation, and publish
failures that must not fail the mutation.

Usage:
    pytest tests/component/task_service -v
"""
import logging

import pytest

from microservices.task_service.protocols import TaskNotFoundError, TaskValidationError
from microservices.task_service.task_service import TaskService
from tests.fixtures import make_task, make_task_create_request, make_task_update_request

from .conftest import TASK_EVENTS_TOPIC

pytestmark = [pytest.mark.component, pytest.mark.asyncio]


# =============================================================================
# create_task
# =============================================================================

class TestCreateTask:

    async def test_create_assigns_id_and_equal_timestamps(self, task_service):
        task = await task_service.create_task(make_task_create_request(title="Write report"))

        assert task.id == 1
        assert task.title == "Write report"
        assert task.status == "TODO"
        assert task.created_at == task.updated_at

    async def test_create_publishes_created_event_keyed_by_id(
        self, task_service, mock_task_repository, mock_event_bus
    ):
        mock_task_repository._next_id = 42

        task = await task_service.create_task(make_task_create_request(title="Write report"))

        assert len(mock_event_bus.published) == 1
        message = mock_event_bus.published[0]
        assert message["topic"] == TASK_EVENTS_TOPIC
        assert message["key"] == "42"

        event = mock_event_bus.get_last_event()
        assert event["taskId"] == task.id == 42
        assert event["title"] == "Write report"
        assert event["status"] == "TODO"
        assert event["eventType"] == "CREATED"
        assert event["description"] is None

    async def test_blank_title_rejected_without_event(
        self, task_service, mock_task_repository, mock_event_bus
    ):
        request = make_task_create_request(title="placeholder")
        request.title = "   "

        with pytest.raises(TaskValidationError):
            await task_service.create_task(request)

        mock_task_repository.assert_not_called("create_task")
        mock_event_bus.assert_no_events_published()

    async def test_store_failure_emits_nothing(self, task_service, mock_task_repository, mock_event_bus):
        mock_task_repository.set_error(RuntimeError("database unavailable"))

        with pytest.raises(RuntimeError):
            await task_service.create_task(make_task_create_request())

        mock_event_bus.assert_no_events_published()

    async def test_publish_failure_does_not_fail_create(
        self, task_service, mock_task_repository, mock_event_bus, caplog
    ):
        mock_event_bus.set_error(ConnectionError("broker down"))

        with caplog.at_level(logging.ERROR):
            task = await task_service.create_task(make_task_create_request(title="Write report"))

        assert task.id == 1
        assert await mock_task_repository.get_task_by_id(task.id) == task
        assert "CREATED" in caplog.text
        assert "task 1" in caplog.text

    async def test_without_publisher_no_events(self, mock_task_repository, mock_event_bus):
        service = TaskService(repository=mock_task_repository)

        await service.create_task(make_task_create_request())

        mock_event_bus.assert_no_events_published()


# =============================================================================
# update_task
# =============================================================================

class TestUpdateTask:

    async def test_update_status_publishes_updated_snapshot(
        self, task_service, mock_task_repository, mock_event_bus
    ):
        mock_task_repository.set_task(make_task(task_id=42, title="Write report"))

        task = await task_service.update_task(42, make_task_update_request(status="DONE"))

        assert task.status == "DONE"
        assert task.title == "Write report"
        assert task.updated_at >= task.created_at

        event = mock_event_bus.assert_event_published("UPDATED", task_id=42)
        assert event["status"] == "DONE"
        assert event["title"] == "Write report"
        assert mock_event_bus.published[-1]["key"] == "42"

    async def test_partial_update_keeps_other_fields(self, task_service, mock_task_repository):
        mock_task_repository.set_task(make_task(task_id=5, title="Old", description="keep me"))

        task = await task_service.update_task(5, make_task_update_request(title="New"))

        assert task.title == "New"
        assert task.description == "keep me"

    async def test_replace_overwrites_every_field(
        self, task_service, mock_task_repository, mock_event_bus
    ):
        mock_task_repository.set_task(
            make_task(task_id=5, title="Old", description="drop me", status="IN_PROGRESS")
        )

        task = await task_service.replace_task(5, make_task_create_request(title="New"))

        assert task.title == "New"
        assert task.description is None
        assert task.status == "TODO"
        mock_event_bus.assert_event_published("UPDATED", task_id=5)

    async def test_replace_missing_task_raises(self, task_service, mock_event_bus):
        with pytest.raises(TaskNotFoundError):
            await task_service.replace_task(99, make_task_create_request(title="New"))

        mock_event_bus.assert_no_events_published()

    async def test_explicit_null_description_clears_it(self, task_service, mock_task_repository):
        mock_task_repository.set_task(make_task(task_id=5, description="old"))

        task = await task_service.update_task(5, make_task_update_request(description=None))

        assert task.description is None

    async def test_update_missing_task_raises_without_event(self, task_service, mock_event_bus):
        with pytest.raises(TaskNotFoundError) as exc_info:
            await task_service.update_task(99, make_task_update_request(status="DONE"))

        assert exc_info.value.task_id == 99
        mock_event_bus.assert_no_events_published()

    async def test_null_status_rejected(self, task_service, mock_task_repository):
        mock_task_repository.set_task(make_task(task_id=5))

        with pytest.raises(TaskValidationError):
            await task_service.update_task(5, make_task_update_request(status=None))

    async def test_empty_update_returns_task_without_event(
        self, task_service, mock_task_repository, mock_event_bus
    ):
        mock_task_repository.set_task(make_task(task_id=5))

        task = await task_service.update_task(5, make_task_update_request())

        assert task.id == 5
        mock_task_repository.assert_not_called("update_task")
        mock_event_bus.assert_no_events_published()

    async def test_publish_failure_does_not_fail_update(
        self, task_service, mock_task_repository, mock_event_bus
    ):
        mock_task_repository.set_task(make_task(task_id=42))
        mock_event_bus.set_error(ConnectionError("broker down"))

        task = await task_service.update_task(42, make_task_update_request(status="IN_PROGRESS"))

        assert task.status == "IN_PROGRESS"
        stored = await mock_task_repository.get_task_by_id(42)
        assert stored.status == "IN_PROGRESS"


# =============================================================================
# delete_task
# =============================================================================

class TestDeleteTask:

    async def test_delete_publishes_pre_deletion_snapshot(
        self, task_service, mock_task_repository, mock_event_bus
    ):
        mock_task_repository.set_task(make_task(task_id=42, title="Write report", status="DONE"))

        snapshot = await task_service.delete_task(42)

        assert snapshot.id == 42
        assert await mock_task_repository.get_task_by_id(42) is None

        event = mock_event_bus.assert_event_published("DELETED", task_id=42)
        assert event["title"] == "Write report"
        assert event["status"] == "DONE"

    async def test_delete_missing_task_raises_without_event(self, task_service, mock_event_bus):
        with pytest.raises(TaskNotFoundError):
            await task_service.delete_task(99)

        mock_event_bus.assert_no_events_published()

    async def test_publish_failure_does_not_fail_delete(
        self, task_service, mock_task_repository, mock_event_bus
    ):
        mock_task_repository.set_task(make_task(task_id=42))
        mock_event_bus.set_error(ConnectionError("broker down"))

        await task_service.delete_task(42)

        assert await mock_task_repository.get_task_by_id(42) is None


# =============================================================================
# Lifecycle
# =============================================================================

class TestTaskLifecycleEvents:

    async def test_create_update_delete_emits_in_order(
        self, task_service, mock_task_repository, mock_event_bus
    ):
        mock_task_repository._next_id = 42

        await task_service.create_task(make_task_create_request(title="Write report"))
        await task_service.update_task(42, make_task_update_request(status="DONE"))
        await task_service.delete_task(42)

        events = mock_event_bus.get_events()
        assert [e["eventType"] for e in events] == ["CREATED", "UPDATED", "DELETED"]
        assert {m["key"] for m in mock_event_bus.published} == {"42"}
        assert events[1]["status"] == "DONE"
        assert events[2]["status"] == "DONE"

    async def test_reads_emit_nothing(self, task_service, mock_task_repository, mock_event_bus):
        mock_task_repository.set_task(make_task(task_id=1, title="Write report"))

        await task_service.get_task(1)
        await task_service.list_tasks()
        await task_service.list_tasks_by_status("TODO")
        await task_service.search_tasks("report")

        mock_event_bus.assert_no_events_published()


# =============================================================================
# Queries
# =============================================================================

class TestTaskQueries:

    async def test_get_missing_task_raises(self, task_service):
        with pytest.raises(TaskNotFoundError):
            await task_service.get_task(7)

    async def test_list_by_status_filters(self, task_service, mock_task_repository):
        mock_task_repository.set_task(make_task(task_id=1, status="TODO"))
        mock_task_repository.set_task(make_task(task_id=2, status="DONE"))

        tasks = await task_service.list_tasks_by_status("DONE")

        assert [t.id for t in tasks] == [2]

    async def test_search_is_case_insensitive(self, task_service, mock_task_repository):
        mock_task_repository.set_task(make_task(task_id=1, title="Write Report"))
        mock_task_repository.set_task(make_task(task_id=2, title="Buy milk"))

        tasks = await task_service.search_tasks("report")

        assert [t.id for t in tasks] == [1]

    async def test_blank_search_returns_empty(self, task_service, mock_task_repository):
        mock_task_repository.set_task(make_task(task_id=1))

        assert await task_service.search_tasks("   ") == []
        mock_task_repository.assert_not_called("search_tasks")
