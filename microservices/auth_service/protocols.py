"""
Authentication Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, Optional, Protocol, runtime_checkable

# Import only models (no I/O dependencies)
from .models import AuthUser


# Custom exceptions - defined here to avoid importing repository

class AuthenticationError(Exception):
    """Base authentication error"""
    pass


class UserAlreadyExistsError(AuthenticationError):
    """Username or email already registered"""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class RegistrationError(AuthenticationError):
    """Registration failed"""
    pass


class InvalidCredentialsError(AuthenticationError):
    """Invalid username or password"""
    pass


@runtime_checkable
class UserRepositoryProtocol(Protocol):
    """
    Interface for the user store.

    Implementations must provide these methods.
    Used for dependency injection to enable testing.
    """

    async def get_user_by_username(self, username: str) -> Optional[AuthUser]:
        ...

    async def exists_by_username(self, username: str) -> bool:
        ...

    async def exists_by_email(self, email: str) -> bool:
        ...

    async def create_user(self, user_data: Dict[str, Any]) -> AuthUser:
        """Insert a user and return it with id"""
        ...


__all__ = [
    "AuthenticationError",
    "UserAlreadyExistsError",
    "RegistrationError",
    "InvalidCredentialsError",
    "UserRepositoryProtocol",
]
