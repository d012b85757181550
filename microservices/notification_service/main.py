"""
Notification Microservice

Consumes task lifecycle events and dispatches them to the notification
handlers. The HTTP surface is a health probe; shutdown drains in-flight
handlers before the process exits.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request

from core.config import PlatformConfig, load_settings
from core.logger import setup_service_logger

from .task_event_consumer import TaskEventConsumer

SERVICE_NAME = "notification_service"
DEFAULT_PORT = 8082

logger = logging.getLogger(SERVICE_NAME)


def create_app(
    settings: Optional[PlatformConfig] = None,
    consumer: Optional[TaskEventConsumer] = None,
) -> FastAPI:
    settings = settings or load_settings(SERVICE_NAME, DEFAULT_PORT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_service_logger(SERVICE_NAME, settings.logging)

        task_consumer = consumer
        if task_consumer is None:
            from .factory import create_task_event_consumer

            task_consumer = await create_task_event_consumer(settings)

        await task_consumer.start()
        app.state.consumer = task_consumer
        logger.info("Notification Service started")

        yield

        await task_consumer.stop()
        logger.info("Notification Service shutting down...")

    app = FastAPI(title=SERVICE_NAME, version="1.0.0", lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        task_consumer = getattr(request.app.state, "consumer", None)
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "consuming": bool(task_consumer and task_consumer.is_running),
        }

    return app


if __name__ == "__main__":
    settings = load_settings(SERVICE_NAME, DEFAULT_PORT)
    uvicorn.run(
        create_app(settings),
        host=settings.service_host,
        port=settings.service_port,
        log_level=settings.logging.log_level.lower(),
    )
