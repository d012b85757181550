#!/usr/bin/env python3
"""Token issuance configuration"""
import os
from dataclasses import dataclass

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


# HS256 needs a key at least as long as the digest
MIN_SECRET_BYTES = 32

DEV_JWT_SECRET = "dev-only-jwt-secret-change-me-0123456789abcdef"


@dataclass(frozen=True)
class AuthConfig:
    """JWT signing settings shared by auth_service and token verifiers"""
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "taskhub"
    token_lifetime_seconds: int = 3600  # 1 hour

    @classmethod
    def from_env(cls) -> 'AuthConfig':
        return cls(
            jwt_secret=os.getenv("JWT_SECRET", DEV_JWT_SECRET),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_issuer=os.getenv("JWT_ISSUER", "taskhub"),
            token_lifetime_seconds=_int(os.getenv("JWT_EXPIRATION_SECONDS", "3600"), 3600),
        )
