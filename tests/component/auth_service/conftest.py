"""
Auth service component fixtures
"""
import pytest

from core.jwt_manager import JWTManager
from microservices.auth_service.auth_service import AuthenticationService

from .mocks import MockUserRepository

# Low bcrypt cost keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def mock_user_repository() -> MockUserRepository:
    return MockUserRepository()


@pytest.fixture
def jwt_manager(auth_config, fake_clock) -> JWTManager:
    return JWTManager(auth_config, clock=fake_clock)


@pytest.fixture
def auth_service(mock_user_repository, jwt_manager) -> AuthenticationService:
    return AuthenticationService(
        repository=mock_user_repository,
        jwt_manager=jwt_manager,
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
    )
