"""
Authentication Service Models

User accounts, sign-up/sign-in requests and token responses.
"""

from typing import Optional, List
from pydantic import BaseModel, Field, EmailStr, field_validator
from datetime import datetime
from enum import Enum

from .password_utils import MAX_PASSWORD_BYTES


class UserRole(str, Enum):
    """Capability labels carried in issued tokens"""
    USER = "ROLE_USER"
    ADMIN = "ROLE_ADMIN"


class AuthUser(BaseModel):
    """
    Auth User model (stored in users table)
    """
    id: int
    username: str
    email: str
    password_hash: str
    role: str = UserRole.USER.value
    created_at: Optional[datetime] = None

    @property
    def roles(self) -> List[str]:
        return [self.role]


# Request Models

class SignupRequest(BaseModel):
    """Register a new account"""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=MAX_PASSWORD_BYTES)
    role: Optional[UserRole] = None

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("username must not be blank")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class SigninRequest(BaseModel):
    """Username/password sign-in"""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenVerificationRequest(BaseModel):
    token: str


# Response Models

class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    """Issued access token"""
    token: str
    type: str = "Bearer"
    id: int
    username: str
    email: str
    roles: List[str]
    expires_in: int


class TokenVerificationResponse(BaseModel):
    """Token verification result"""
    valid: bool
    subject: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    error: Optional[str] = None
