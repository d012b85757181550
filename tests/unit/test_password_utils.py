"""
Password Utilities Unit Tests
"""
import pytest

from microservices.auth_service.password_utils import (
    MAX_PASSWORD_BYTES,
    hash_password,
    is_password_strong,
    verify_password,
)

pytestmark = [pytest.mark.unit]

ROUNDS = 4


def test_hash_and_verify():
    hashed = hash_password("Secret123", rounds=ROUNDS)

    assert hashed != "Secret123"
    assert hashed.startswith("$2")
    assert verify_password("Secret123", hashed)
    assert not verify_password("Secret124", hashed)


def test_hashes_are_salted():
    assert hash_password("Secret123", rounds=ROUNDS) != hash_password("Secret123", rounds=ROUNDS)


def test_malformed_hash_is_mismatch():
    assert verify_password("Secret123", "not-a-bcrypt-hash") is False


@pytest.mark.parametrize("password, ok", [
    ("Secret123", True),
    ("short1", False),
    ("onlyletters", False),
    ("1234567890", False),
])
def test_password_strength(password, ok):
    valid, message = is_password_strong(password)

    assert valid is ok
    assert (message is None) is ok


def test_password_at_bcrypt_limit_hashes():
    password = "a1" * 36

    hashed = hash_password(password, rounds=ROUNDS)

    assert len(password.encode("utf-8")) == MAX_PASSWORD_BYTES
    assert verify_password(password, hashed)


@pytest.mark.parametrize("password", ["a1" * 36 + "x", "é1" * 25])
def test_password_over_bcrypt_limit_is_weak(password):
    valid, message = is_password_strong(password)

    assert valid is False
    assert "72 bytes" in message
