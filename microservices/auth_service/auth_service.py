"""
Authentication Service

Account registration, username/password sign-in and token verification.
Tokens are issued by the shared JWTManager; their subject is the username
and their capabilities are the account roles.
"""

import asyncio
import logging

from core.jwt_manager import JWTManager, TokenError

from .models import (
    AuthUser,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    TokenVerificationResponse,
    UserRole,
)
from .password_utils import BCRYPT_ROUNDS, hash_password, is_password_strong, verify_password
from .protocols import (
    InvalidCredentialsError,
    RegistrationError,
    UserAlreadyExistsError,
    UserRepositoryProtocol,
)

logger = logging.getLogger(__name__)


class AuthenticationService:
    """Authentication business logic"""

    def __init__(
        self,
        repository: UserRepositoryProtocol,
        jwt_manager: JWTManager,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ):
        self.repository = repository
        self.jwt_manager = jwt_manager
        self.bcrypt_rounds = bcrypt_rounds

    async def signup(self, request: SignupRequest) -> AuthUser:
        """
        Register an account

        Raises:
            UserAlreadyExistsError: username or email taken
            RegistrationError: password too weak
        """
        if await self.repository.exists_by_username(request.username):
            raise UserAlreadyExistsError("Username is already taken", field="username")
        if await self.repository.exists_by_email(request.email):
            raise UserAlreadyExistsError("Email is already in use", field="email")

        ok, reason = is_password_strong(request.password)
        if not ok:
            raise RegistrationError(reason)

        # bcrypt is CPU bound
        password_hash = await asyncio.to_thread(
            hash_password, request.password, self.bcrypt_rounds
        )
        role = (request.role or UserRole.USER).value

        user = await self.repository.create_user({
            "username": request.username,
            "email": str(request.email),
            "password_hash": password_hash,
            "role": role,
        })
        logger.info(f"User registered: {user.username} ({role})")
        return user

    async def signin(self, request: SigninRequest) -> TokenResponse:
        """
        Authenticate and issue a token

        Unknown user and wrong password are reported the same way.
        """
        user = await self.repository.get_user_by_username(request.username)
        if user is None:
            raise InvalidCredentialsError("Invalid username or password")

        matches = await asyncio.to_thread(verify_password, request.password, user.password_hash)
        if not matches:
            logger.info(f"Failed sign-in for {request.username}")
            raise InvalidCredentialsError("Invalid username or password")

        token = self.jwt_manager.issue(user.username, user.roles)
        return TokenResponse(
            token=token,
            id=user.id,
            username=user.username,
            email=user.email,
            roles=user.roles,
            expires_in=int(self.jwt_manager.lifetime.total_seconds()),
        )

    def verify_token(self, token: str) -> TokenVerificationResponse:
        try:
            verified = self.jwt_manager.verify(token)
        except TokenError as e:
            return TokenVerificationResponse(valid=False, error=e.code)

        return TokenVerificationResponse(
            valid=True,
            subject=verified.subject,
            roles=list(verified.capabilities),
            issued_at=verified.issued_at,
            expires_at=verified.expires_at,
        )
