"""
Authentication Repository

User accounts on PostgreSQL (table ``users``).
"""

import logging
from typing import Any, Dict, Optional

from asyncpg.exceptions import UniqueViolationError

from core.postgres_client import PostgresClient

from .models import AuthUser
from .protocols import UserAlreadyExistsError

logger = logging.getLogger(__name__)

USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    id BIGSERIAL PRIMARY KEY,
    username VARCHAR(50) NOT NULL UNIQUE,
    email VARCHAR(120) NOT NULL UNIQUE,
    password_hash VARCHAR(120) NOT NULL,
    role VARCHAR(30) NOT NULL DEFAULT 'ROLE_USER',
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE UNIQUE INDEX IF NOT EXISTS users_email_lower_key ON users (lower(email));
"""


class UserRepository:
    """User data access layer"""

    def __init__(self, db: PostgresClient):
        self.db = db
        self.users_table = "users"

    async def initialize(self):
        await self.db.execute(USERS_DDL)

    async def get_user_by_username(self, username: str) -> Optional[AuthUser]:
        row = await self.db.query_row(
            f"SELECT * FROM {self.users_table} WHERE username = $1", [username]
        )
        return AuthUser(**row) if row else None

    async def exists_by_username(self, username: str) -> bool:
        row = await self.db.query_row(
            f"SELECT 1 AS found FROM {self.users_table} WHERE username = $1", [username]
        )
        return row is not None

    async def exists_by_email(self, email: str) -> bool:
        row = await self.db.query_row(
            f"SELECT 1 AS found FROM {self.users_table} WHERE lower(email) = lower($1)", [email]
        )
        return row is not None

    async def create_user(self, user_data: Dict[str, Any]) -> AuthUser:
        """
        Insert a user.

        Raises:
            UserAlreadyExistsError: a concurrent sign-up took the username or
                email between the existence check and this insert
        """
        try:
            row = await self.db.query_row(
                f"""
                INSERT INTO {self.users_table} (username, email, password_hash, role)
                VALUES ($1, $2, $3, $4)
                RETURNING *
                """,
                [
                    user_data["username"],
                    user_data["email"],
                    user_data["password_hash"],
                    user_data["role"],
                ],
            )
        except UniqueViolationError as e:
            if "email" in (e.constraint_name or ""):
                raise UserAlreadyExistsError("Email is already in use", field="email") from e
            raise UserAlreadyExistsError("Username is already taken", field="username") from e
        logger.info(f"User created: {row['id']} ({row['username']})")
        return AuthUser(**row)
