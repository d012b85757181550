"""
Task Microservice

Responsibilities:
- Task CRUD with lifecycle events on the task events topic
- Task file attachments stored in MinIO

All task endpoints require a bearer token issued by auth_service.
"""

import io
import logging
from contextlib import asynccontextmanager
from typing import List, Optional
from urllib.parse import quote

import uvicorn
from fastapi import Depends, FastAPI, File, Query, Request, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.auth_dependencies import require_user
from core.config import PlatformConfig, load_settings
from core.jwt_manager import JWTManager, VerifiedToken
from core.logger import setup_service_logger
from core.nats_client import create_event_bus
from core.postgres_client import PostgresClient

from .attachment_service import AttachmentService
from .models import (
    AttachmentResponse,
    AttachmentUrlResponse,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
)
from .protocols import (
    AttachmentNotFoundError,
    ObjectStorageError,
    TaskNotFoundError,
    TaskValidationError,
)
from .task_service import TaskService

SERVICE_NAME = "task_service"
DEFAULT_PORT = 8081

logger = logging.getLogger(SERVICE_NAME)


def create_app(
    settings: Optional[PlatformConfig] = None,
    task_service: Optional[TaskService] = None,
    attachment_service: Optional[AttachmentService] = None,
    jwt_manager: Optional[JWTManager] = None,
) -> FastAPI:
    """
    Build the task service application.

    Services passed in are used as-is; anything missing is created from
    settings during startup (database pool, event bus, object store).
    """
    settings = settings or load_settings(SERVICE_NAME, DEFAULT_PORT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_service_logger(SERVICE_NAME, settings.logging)

        db = None
        event_bus = None
        app.state.jwt_manager = jwt_manager or JWTManager(settings.auth)

        if task_service is None or attachment_service is None:
            from .factory import (
                create_attachment_repository,
                create_attachment_service,
                create_task_repository,
                create_task_service,
            )

            db = PostgresClient(settings.postgres, service_name=SERVICE_NAME)
            await db.connect()
            await create_task_repository(db).initialize()
            await create_attachment_repository(db).initialize()

            try:
                event_bus = await create_event_bus(settings.events, SERVICE_NAME)
                await event_bus.ensure_topic(settings.events.task_events_topic)
            except Exception as e:
                # Mutations still succeed; lifecycle events are skipped
                logger.warning(f"Event bus unavailable: {e}. Continuing without event publishing.")
                event_bus = None

            app.state.task_service = task_service or create_task_service(db, event_bus, settings)
            app.state.attachment_service = attachment_service or create_attachment_service(db, settings)
        else:
            app.state.task_service = task_service
            app.state.attachment_service = attachment_service

        logger.info(f"Task Service started on port {settings.service_port}")

        yield

        if event_bus:
            try:
                await event_bus.close()
                logger.info("Event bus closed")
            except Exception as e:
                logger.error(f"Error closing event bus: {e}")
        if db:
            await db.close()

        logger.info("Task Service shutting down...")

    app = FastAPI(title=SERVICE_NAME, version="1.0.0", lifespan=lifespan)
    _register_error_handlers(app)
    _register_routes(app)
    return app


def _tasks(request: Request) -> TaskService:
    return request.app.state.task_service


def _attachments(request: Request) -> AttachmentService:
    return request.app.state.attachment_service


def _register_error_handlers(app: FastAPI):
    @app.exception_handler(TaskNotFoundError)
    async def task_not_found_handler(request, exc):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(AttachmentNotFoundError)
    async def attachment_not_found_handler(request, exc):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(TaskValidationError)
    async def validation_error_handler(request, exc):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request, exc):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": _validation_errors(exc)},
        )

    @app.exception_handler(ObjectStorageError)
    async def storage_error_handler(request, exc):
        logger.error(f"Object storage failure on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "Object storage unavailable"},
        )


def content_disposition(filename: str) -> str:
    """
    Attachment header for an arbitrary filename (RFC 6266 / RFC 5987).

    Header values are latin-1 on the wire, so the plain filename parameter
    carries an ASCII fallback and filename* carries the UTF-8 name.
    """
    fallback = "".join(
        c if " " <= c <= "~" and c not in "\"\\" else "_" for c in filename
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _validation_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


def _register_routes(app: FastAPI):

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": SERVICE_NAME}

    # ====================
    # Tasks
    # ====================

    @app.get("/api/tasks", response_model=List[TaskResponse])
    async def list_tasks(
        request: Request,
        status_filter: Optional[str] = Query(None, alias="status"),
        search: Optional[str] = Query(None),
        limit: int = Query(100, ge=1, le=1000),
        offset: int = Query(0, ge=0),
        user: VerifiedToken = Depends(require_user),
    ):
        service = _tasks(request)
        if search is not None:
            return await service.search_tasks(search)
        if status_filter is not None:
            return await service.list_tasks_by_status(status_filter)
        return await service.list_tasks(limit=limit, offset=offset)

    @app.get("/api/tasks/{task_id}", response_model=TaskResponse)
    async def get_task(task_id: int, request: Request, user: VerifiedToken = Depends(require_user)):
        return await _tasks(request).get_task(task_id)

    @app.post("/api/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
    async def create_task(
        payload: TaskCreateRequest,
        request: Request,
        user: VerifiedToken = Depends(require_user),
    ):
        return await _tasks(request).create_task(payload)

    @app.put("/api/tasks/{task_id}", response_model=TaskResponse)
    async def replace_task(
        task_id: int,
        payload: TaskCreateRequest,
        request: Request,
        user: VerifiedToken = Depends(require_user),
    ):
        """Full replacement: omitted description is cleared, omitted status resets to TODO"""
        return await _tasks(request).replace_task(task_id, payload)

    @app.patch("/api/tasks/{task_id}", response_model=TaskResponse)
    async def update_task(
        task_id: int,
        payload: TaskUpdateRequest,
        request: Request,
        user: VerifiedToken = Depends(require_user),
    ):
        """Partial update: only fields present in the body change"""
        return await _tasks(request).update_task(task_id, payload)

    @app.delete("/api/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_task(task_id: int, request: Request, user: VerifiedToken = Depends(require_user)):
        await _tasks(request).delete_task(task_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # ====================
    # Attachments
    # ====================

    @app.post(
        "/api/tasks/{task_id}/attachments",
        response_model=AttachmentResponse,
        status_code=status.HTTP_201_CREATED,
    )
    async def upload_attachment(
        task_id: int,
        request: Request,
        file: UploadFile = File(...),
        user: VerifiedToken = Depends(require_user),
    ):
        content = await file.read()
        return await _attachments(request).upload_attachment(
            task_id,
            filename=file.filename or "",
            stream=io.BytesIO(content),
            size=len(content),
            content_type=file.content_type,
        )

    @app.get("/api/tasks/{task_id}/attachments", response_model=List[AttachmentResponse])
    async def list_attachments(task_id: int, request: Request, user: VerifiedToken = Depends(require_user)):
        return await _attachments(request).list_attachments(task_id)

    @app.get("/api/tasks/{task_id}/attachments/{attachment_id}/download")
    async def download_attachment(
        task_id: int,
        attachment_id: int,
        request: Request,
        user: VerifiedToken = Depends(require_user),
    ):
        attachment, content = await _attachments(request).download_attachment(task_id, attachment_id)
        return Response(
            content=content,
            media_type=attachment.content_type or "application/octet-stream",
            headers={"Content-Disposition": content_disposition(attachment.original_filename)},
        )

    @app.get(
        "/api/tasks/{task_id}/attachments/{attachment_id}/url",
        response_model=AttachmentUrlResponse,
    )
    async def get_download_url(
        task_id: int,
        attachment_id: int,
        request: Request,
        user: VerifiedToken = Depends(require_user),
    ):
        return await _attachments(request).get_download_url(task_id, attachment_id)

    @app.delete(
        "/api/tasks/{task_id}/attachments/{attachment_id}",
        status_code=status.HTTP_204_NO_CONTENT,
    )
    async def delete_attachment(
        task_id: int,
        attachment_id: int,
        request: Request,
        user: VerifiedToken = Depends(require_user),
    ):
        await _attachments(request).delete_attachment(task_id, attachment_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


if __name__ == "__main__":
    settings = load_settings(SERVICE_NAME, DEFAULT_PORT)
    uvicorn.run(
        create_app(settings),
        host=settings.service_host,
        port=settings.service_port,
        log_level=settings.logging.log_level.lower(),
    )
