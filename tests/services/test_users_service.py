from __future__ import annotations

import pytest

from vc_demo.repos.user_repo import InMemoryUserRepo
from vc_demo.services import users_service


def test_register_user_hashes_password() -> None:
    repo = InMemoryUserRepo()
    user = users_service.register_user(repo, "  tee  ", "password123")

    assert user.id == 1
    assert user.username == "tee"
    assert user.password_hash.startswith("$argon2")
    assert users_service.verify_password("password123", user.password_hash)


def test_register_rejects_blank_username() -> None:
    with pytest.raises(users_service.UserValidationError):
        users_service.register_user(InMemoryUserRepo(), "   ", "password123")


def test_register_rejects_short_password() -> None:
    with pytest.raises(users_service.UserValidationError, match="at least 8"):
        users_service.register_user(InMemoryUserRepo(), "tee", "short")


def test_register_rejects_duplicate_username() -> None:
    repo = InMemoryUserRepo()
    users_service.register_user(repo, "tee", "password123")
    with pytest.raises(users_service.UserAlreadyExistsError):
        users_service.register_user(repo, "tee", "another-password")


def test_verify_password_rejects_wrong_password() -> None:
    hashed = users_service.hash_password("right-password")
    assert users_service.verify_password("wrong-password", hashed) is False


def test_verify_password_handles_invalid_hash() -> None:
    assert users_service.verify_password("anything", "not-an-argon2-hash") is False
    assert users_service.verify_password("", "whatever") is False


def test_hash_password_rejects_empty() -> None:
    with pytest.raises(ValueError):
        users_service.hash_password("")
