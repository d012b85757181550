"""
Authentication Service Package

Account registration, sign-in and token verification
"""

from .auth_service import AuthenticationService

__version__ = "1.0.0"
__all__ = ["AuthenticationService"]
