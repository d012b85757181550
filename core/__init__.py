#!/usr/bin/env python3
"""
Core Module for Microservices Architecture

Shared infrastructure for the task hub services.

COMPONENTS:
    - config/: Immutable per-process settings (load_settings)
    - jwt_manager.py: HS256 token issue/verify
    - auth_dependencies.py: FastAPI bearer token dependency
    - nats_client.py: NATS JetStream event bus (keyed topics, consumer groups)
    - postgres_client.py: asyncpg pool wrapper
    - logger.py: Service logging setup

USAGE:
    from core.config import load_settings
    from core.jwt_manager import JWTManager

    settings = load_settings("task_service")
    tokens = JWTManager(settings.auth)
"""

__version__ = "1.0.0"
