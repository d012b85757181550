"""
Authentication Microservice

Responsibilities:
- Account registration (bcrypt password hashes)
- Username/password sign-in issuing HS256 bearer tokens
- Token verification for other services and clients
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, status

from core.auth_dependencies import require_user
from core.config import PlatformConfig, load_settings
from core.jwt_manager import VerifiedToken
from core.logger import setup_service_logger
from core.postgres_client import PostgresClient

from .auth_service import AuthenticationService
from .models import (
    MessageResponse,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    TokenVerificationRequest,
    TokenVerificationResponse,
)
from .protocols import InvalidCredentialsError, RegistrationError, UserAlreadyExistsError

SERVICE_NAME = "auth_service"
DEFAULT_PORT = 8080

logger = logging.getLogger(SERVICE_NAME)


def create_app(
    settings: Optional[PlatformConfig] = None,
    auth_service: Optional[AuthenticationService] = None,
) -> FastAPI:
    settings = settings or load_settings(SERVICE_NAME, DEFAULT_PORT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_service_logger(SERVICE_NAME, settings.logging)

        db = None
        service = auth_service
        if service is None:
            from .factory import create_auth_service, create_user_repository

            db = PostgresClient(settings.postgres, service_name=SERVICE_NAME)
            await db.connect()
            await create_user_repository(db).initialize()
            service = create_auth_service(db, settings)

        app.state.auth_service = service
        app.state.jwt_manager = service.jwt_manager
        logger.info(f"Auth Service started on port {settings.service_port}")

        yield

        if db:
            await db.close()
        logger.info("Auth Service shutting down...")

    app = FastAPI(title=SERVICE_NAME, version="1.0.0", lifespan=lifespan)

    def _service(request: Request) -> AuthenticationService:
        return request.app.state.auth_service

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": SERVICE_NAME}

    @app.post("/api/auth/signup", response_model=MessageResponse)
    async def signup(payload: SignupRequest, request: Request):
        try:
            await _service(request).signup(payload)
        except UserAlreadyExistsError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Error: {e}!")
        except RegistrationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        return MessageResponse(message="User registered successfully!")

    @app.post("/api/auth/signin", response_model=TokenResponse)
    async def signin(payload: SigninRequest, request: Request):
        try:
            return await _service(request).signin(payload)
        except InvalidCredentialsError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(e),
                headers={"WWW-Authenticate": "Bearer"},
            )

    @app.post("/api/auth/verify", response_model=TokenVerificationResponse)
    async def verify(payload: TokenVerificationRequest, request: Request):
        return _service(request).verify_token(payload.token)

    @app.get("/api/auth/me")
    async def me(user: VerifiedToken = Depends(require_user)):
        return {"username": user.subject, "roles": list(user.capabilities)}

    return app


if __name__ == "__main__":
    settings = load_settings(SERVICE_NAME, DEFAULT_PORT)
    uvicorn.run(
        create_app(settings),
        host=settings.service_host,
        port=settings.service_port,
        log_level=settings.logging.log_level.lower(),
    )
