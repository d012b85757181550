"""
JWT Token Manager for the task hub platform

Issues and verifies self-signed HS256 identity tokens. Stateless: the only
inputs are the configured secret, the injected clock and the token itself.
"""

import jwt
import uuid
import logging
from typing import Callable, Iterable, Optional, Tuple
from datetime import datetime, timedelta, timezone
from dataclasses import dataclass

from core.config.auth_config import AuthConfig, MIN_SECRET_BYTES

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenError(Exception):
    """Base class for token verification failures"""
    code = "invalid_token"


class MalformedTokenError(TokenError):
    """Token is empty, not three segments, or carries an unusable payload"""
    code = "malformed_token"


class SignatureInvalidError(TokenError):
    """Signature does not match the configured secret"""
    code = "signature_invalid"


class TokenExpiredError(TokenError):
    """Token signature is valid but current time is at or past expires-at"""
    code = "token_expired"

    def __init__(self, message: str, expired_at: Optional[datetime] = None):
        super().__init__(message)
        self.expired_at = expired_at


@dataclass(frozen=True)
class VerifiedToken:
    """Claims of a token that passed verification"""
    subject: str
    capabilities: Tuple[str, ...]
    issued_at: datetime
    expires_at: datetime
    token_id: Optional[str] = None


class JWTManager:
    """
    Token service

    - issue(): sign subject + capabilities with a fixed lifetime
    - verify(): signature first, then expiry against the injected clock
    - extract_subject(): verify and return the subject only

    There is no revocation list; expiry is the only invalidation mechanism.
    """

    def __init__(self, config: AuthConfig, clock: Clock = utc_now):
        """
        Initialize JWT Manager

        Args:
            config: Signing secret, algorithm, issuer and token lifetime
            clock: Returns the current time as an aware datetime
        """
        if len(config.jwt_secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ValueError(
                f"JWT secret must be at least {MIN_SECRET_BYTES} bytes ({MIN_SECRET_BYTES * 8} bits)"
            )
        if config.token_lifetime_seconds <= 0:
            raise ValueError("Token lifetime must be positive")

        self._secret = config.jwt_secret
        self.algorithm = config.jwt_algorithm
        self.issuer = config.jwt_issuer
        self.lifetime = timedelta(seconds=config.token_lifetime_seconds)
        self._clock = clock

    def issue(self, subject: str, capabilities: Iterable[str] = ()) -> str:
        """
        Create a signed token

        Args:
            subject: User identity string
            capabilities: Granted capability labels (e.g. ROLE_USER)

        Returns:
            Compact JWT string (header.payload.signature)
        """
        if not subject:
            raise ValueError("Token subject must not be empty")

        now = self._clock()
        expires = now + self.lifetime

        payload = {
            "iss": self.issuer,
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int(expires.timestamp()),
            "jti": str(uuid.uuid4()),
            "roles": list(capabilities),
        }

        token = jwt.encode(payload, self._secret, algorithm=self.algorithm)

        logger.debug(f"Issued token for subject: {subject}, expires: {expires}")
        return token

    def verify(self, token: str) -> VerifiedToken:
        """
        Verify and decode a token

        Raises:
            MalformedTokenError: empty, structurally invalid or missing claims
            SignatureInvalidError: signature does not match
            TokenExpiredError: current time >= expires-at
        """
        if not token or not isinstance(token, str):
            raise MalformedTokenError("Token is empty")
        if token.count(".") != 2:
            raise MalformedTokenError("Token must have three segments")

        try:
            # Expiry is checked below against the injected clock
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": ["sub", "iat", "exp"],
                },
            )
        except jwt.InvalidSignatureError as e:
            raise SignatureInvalidError("Token signature is invalid") from e
        except jwt.InvalidAlgorithmError as e:
            raise SignatureInvalidError(f"Token algorithm not accepted: {e}") from e
        except jwt.DecodeError as e:
            raise MalformedTokenError(f"Token could not be decoded: {e}") from e
        except jwt.InvalidTokenError as e:
            # Missing claims, wrong issuer, non-string subject
            raise MalformedTokenError(f"Invalid token claims: {e}") from e

        try:
            issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        except (TypeError, ValueError, OverflowError) as e:
            raise MalformedTokenError(f"Invalid token timestamps: {e}") from e

        roles = payload.get("roles", [])
        if not isinstance(roles, list):
            raise MalformedTokenError("Token roles claim must be a list")

        if self._clock() >= expires_at:
            raise TokenExpiredError("Token has expired", expired_at=expires_at)

        return VerifiedToken(
            subject=payload["sub"],
            capabilities=tuple(str(r) for r in roles),
            issued_at=issued_at,
            expires_at=expires_at,
            token_id=payload.get("jti"),
        )

    def extract_subject(self, token: str) -> str:
        """
        Return the subject of a token.

        Callers are expected to have verified the token already; it is
        verified again here so unverified input never yields a subject.
        """
        return self.verify(token).subject


__all__ = [
    "JWTManager",
    "VerifiedToken",
    "TokenError",
    "MalformedTokenError",
    "SignatureInvalidError",
    "TokenExpiredError",
    "utc_now",
]
