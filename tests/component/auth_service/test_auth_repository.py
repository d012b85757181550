"""
User Repository Component Tests

SQL issued by UserRepository against a mocked PostgreSQL client, including
unique violations raised when two sign-ups race past the existence check.
"""
from datetime import datetime, timezone

import pytest
from asyncpg.exceptions import UniqueViolationError

from microservices.auth_service.auth_repository import UserRepository
from microservices.auth_service.protocols import UserAlreadyExistsError

pytestmark = [pytest.mark.component, pytest.mark.asyncio]

USER_DATA = {
    "username": "alice",
    "email": "alice@example.com",
    "password_hash": "$2b$04$hash",
    "role": "ROLE_USER",
}


def _unique_violation(constraint: str) -> UniqueViolationError:
    error = UniqueViolationError(f'duplicate key value violates unique constraint "{constraint}"')
    error.constraint_name = constraint
    return error


async def test_initialize_creates_table_and_email_index(mock_db):
    await UserRepository(mock_db).initialize()

    mock_db.assert_query_executed("CREATE TABLE IF NOT EXISTS users", method="execute")
    mock_db.assert_query_executed("lower(email)", method="execute")


async def test_create_user_maps_row(mock_db):
    mock_db.set_row_response({
        "id": 1,
        **USER_DATA,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    })

    user = await UserRepository(mock_db).create_user(USER_DATA)

    assert user.id == 1
    assert user.roles == ["ROLE_USER"]
    method, query, params = mock_db.get_last_query()
    assert "INSERT INTO users" in query
    assert params == ["alice", "alice@example.com", "$2b$04$hash", "ROLE_USER"]


async def test_concurrent_username_insert_is_already_exists(mock_db):
    mock_db.set_error(_unique_violation("users_username_key"))

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        await UserRepository(mock_db).create_user(USER_DATA)

    assert exc_info.value.field == "username"
    assert str(exc_info.value) == "Username is already taken"


@pytest.mark.parametrize("constraint", ["users_email_key", "users_email_lower_key"])
async def test_concurrent_email_insert_is_already_exists(mock_db, constraint):
    mock_db.set_error(_unique_violation(constraint))

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        await UserRepository(mock_db).create_user(USER_DATA)

    assert exc_info.value.field == "email"


async def test_email_lookup_is_case_insensitive(mock_db):
    mock_db.set_row_response({"found": 1})

    assert await UserRepository(mock_db).exists_by_email("ALICE@example.com")
    assert "lower(email) = lower($1)" in mock_db.get_last_query()[1]
