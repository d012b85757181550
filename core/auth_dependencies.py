"""
FastAPI Authentication Dependencies for Microservices

Bearer-token dependency shared by the HTTP adapters. The token manager is
taken from ``app.state.jwt_manager`` which each service sets at startup.
"""

from fastapi import Header, HTTPException, status, Request
from typing import Optional
import logging

from core.jwt_manager import JWTManager, TokenError, VerifiedToken

logger = logging.getLogger(__name__)


def get_jwt_manager(request: Request) -> JWTManager:
    manager = getattr(request.app.state, "jwt_manager", None)
    if manager is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Token verification not configured"
        )
    return manager


async def require_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> VerifiedToken:
    """
    Authentication dependency: require a valid bearer token.

    Verification failures are never downgraded to anonymous access.

    Usage:
        @app.get("/api/tasks")
        async def list_tasks(user: VerifiedToken = Depends(require_user)):
            ...
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Bearer token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[len("bearer "):].strip()
    try:
        return get_jwt_manager(request).verify(token)
    except TokenError as e:
        logger.info(f"Rejected token on {request.url.path}: {e.code}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.code,
            headers={"WWW-Authenticate": "Bearer"},
        )


__all__ = [
    "require_user",
    "get_jwt_manager",
]
