"""
Task Repository

Task data access layer on PostgreSQL. Ids and timestamps are assigned by
the database; each statement commits on return.
"""

import logging
from typing import Any, Dict, List, Optional

from core.postgres_client import PostgresClient

from .models import AttachmentResponse, TaskResponse

logger = logging.getLogger(__name__)

TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id BIGSERIAL PRIMARY KEY,
    title VARCHAR(255) NOT NULL CHECK (length(trim(title)) > 0),
    description TEXT,
    status VARCHAR(50) NOT NULL DEFAULT 'TODO',
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL,
    CHECK (updated_at >= created_at)
)
"""

ATTACHMENTS_DDL = """
CREATE TABLE IF NOT EXISTS task_attachments (
    id BIGSERIAL PRIMARY KEY,
    task_id BIGINT NOT NULL,
    storage_key VARCHAR(512) NOT NULL UNIQUE,
    original_filename VARCHAR(255) NOT NULL,
    content_type VARCHAR(255),
    size BIGINT NOT NULL,
    uploaded_at TIMESTAMP NOT NULL
)
"""

_EDITABLE_FIELDS = ("title", "description", "status")


class TaskRepository:
    """Task data access layer"""

    def __init__(self, db: PostgresClient):
        self.db = db
        self.table_name = "tasks"

    async def initialize(self):
        """Create the table if missing"""
        await self.db.execute(TASKS_DDL)

    async def create_task(self, task_data: Dict[str, Any]) -> TaskResponse:
        # created_at and updated_at come from the same now() so they are equal
        query = f"""
            INSERT INTO {self.table_name} (title, description, status, created_at, updated_at)
            VALUES ($1, $2, $3, LOCALTIMESTAMP, LOCALTIMESTAMP)
            RETURNING *
        """
        row = await self.db.query_row(
            query,
            [task_data["title"], task_data.get("description"), task_data.get("status", "TODO")],
        )
        return self._parse_task(row)

    async def get_task_by_id(self, task_id: int) -> Optional[TaskResponse]:
        row = await self.db.query_row(
            f"SELECT * FROM {self.table_name} WHERE id = $1", [task_id]
        )
        return self._parse_task(row) if row else None

    async def list_tasks(self, limit: int = 100, offset: int = 0) -> List[TaskResponse]:
        rows = await self.db.query(
            f"SELECT * FROM {self.table_name} ORDER BY id LIMIT $1 OFFSET $2",
            [limit, offset],
        )
        return [self._parse_task(row) for row in rows]

    async def list_tasks_by_status(self, status: str) -> List[TaskResponse]:
        rows = await self.db.query(
            f"SELECT * FROM {self.table_name} WHERE status = $1 ORDER BY id", [status]
        )
        return [self._parse_task(row) for row in rows]

    async def search_tasks(self, keyword: str) -> List[TaskResponse]:
        escaped = keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        rows = await self.db.query(
            f"SELECT * FROM {self.table_name} WHERE title ILIKE $1 ORDER BY id",
            [f"%{escaped}%"],
        )
        return [self._parse_task(row) for row in rows]

    async def update_task(self, task_id: int, updates: Dict[str, Any]) -> Optional[TaskResponse]:
        fields = [name for name in _EDITABLE_FIELDS if name in updates]
        if not fields:
            return await self.get_task_by_id(task_id)

        set_clauses = [f"{name} = ${i}" for i, name in enumerate(fields, start=2)]
        set_clauses.append("updated_at = GREATEST(LOCALTIMESTAMP, created_at)")
        query = f"""
            UPDATE {self.table_name}
            SET {', '.join(set_clauses)}
            WHERE id = $1
            RETURNING *
        """
        row = await self.db.query_row(query, [task_id] + [updates[name] for name in fields])
        return self._parse_task(row) if row else None

    async def delete_task(self, task_id: int) -> bool:
        count = await self.db.execute(
            f"DELETE FROM {self.table_name} WHERE id = $1", [task_id]
        )
        return count > 0

    @staticmethod
    def _parse_task(row: Dict[str, Any]) -> TaskResponse:
        return TaskResponse(
            id=row["id"],
            title=row["title"],
            description=row.get("description"),
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


class AttachmentRepository:
    """Attachment metadata data access layer"""

    def __init__(self, db: PostgresClient):
        self.db = db
        self.table_name = "task_attachments"

    async def initialize(self):
        await self.db.execute(ATTACHMENTS_DDL)

    async def create_attachment(self, attachment_data: Dict[str, Any]) -> AttachmentResponse:
        query = f"""
            INSERT INTO {self.table_name}
                (task_id, storage_key, original_filename, content_type, size, uploaded_at)
            VALUES ($1, $2, $3, $4, $5, LOCALTIMESTAMP)
            RETURNING *
        """
        row = await self.db.query_row(
            query,
            [
                attachment_data["task_id"],
                attachment_data["storage_key"],
                attachment_data["original_filename"],
                attachment_data.get("content_type"),
                attachment_data["size"],
            ],
        )
        return AttachmentResponse(**row)

    async def get_attachment(self, attachment_id: int) -> Optional[AttachmentResponse]:
        row = await self.db.query_row(
            f"SELECT * FROM {self.table_name} WHERE id = $1", [attachment_id]
        )
        return AttachmentResponse(**row) if row else None

    async def list_attachments(self, task_id: int) -> List[AttachmentResponse]:
        rows = await self.db.query(
            f"SELECT * FROM {self.table_name} WHERE task_id = $1 ORDER BY uploaded_at, id",
            [task_id],
        )
        return [AttachmentResponse(**row) for row in rows]

    async def delete_attachment(self, attachment_id: int) -> bool:
        count = await self.db.execute(
            f"DELETE FROM {self.table_name} WHERE id = $1", [attachment_id]
        )
        return count > 0
