"""
Authentication Service Factory

Factory functions for creating service instances with real dependencies.
This is the ONLY place that imports I/O-dependent modules.

Usage:
    from .factory import create_auth_service
    service = create_auth_service(db, settings)
"""
from typing import Optional

from core.config.platform_config import PlatformConfig
from core.jwt_manager import JWTManager
from core.postgres_client import PostgresClient

from .auth_service import AuthenticationService


def create_user_repository(db: PostgresClient):
    from .auth_repository import UserRepository

    return UserRepository(db)


def create_auth_service(
    db: PostgresClient,
    settings: PlatformConfig,
    jwt_manager: Optional[JWTManager] = None,
) -> AuthenticationService:
    """
    Create AuthenticationService with real dependencies.

    Args:
        db: Connected PostgreSQL client
        settings: Platform configuration (JWT secret and lifetime)
        jwt_manager: Shared token manager; built from settings when omitted
    """
    return AuthenticationService(
        repository=create_user_repository(db),
        jwt_manager=jwt_manager or JWTManager(settings.auth),
    )


__all__ = ["create_auth_service", "create_user_repository"]
