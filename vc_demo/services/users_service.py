"""Demo user accounts: registration and argon2 password hashing.

Nothing in the HTTP API logs users in.  ``verify_password`` is the
counterpart of ``hash_password`` for a future login route and is only
exercised by the tests today.
"""

from __future__ import annotations

import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from vc_demo.models.user import NewUser, User
from vc_demo.repos.user_repo import UserRepo

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

# Argon2 hash strings encode parameters + salt
_ph = PasswordHasher()


class UserValidationError(ValueError):
    pass


class UserAlreadyExistsError(Exception):
    pass


def hash_password(plain_password: str) -> str:
    if not plain_password:
        raise ValueError("password must be non-empty")
    return _ph.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return _ph.verify(password_hash, plain_password)
    except (VerifyMismatchError, VerificationError, InvalidHash):
        return False


def register_user(repo: UserRepo, username: str, password: str) -> User:
    username = username.strip()
    if not username:
        logger.warning("Rejected blank username")
        raise UserValidationError("username must be non-empty")

    if len(password) < MIN_PASSWORD_LENGTH:
        logger.warning("Rejected short password for username=%s", username)
        raise UserValidationError(
            f"password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    if repo.get_user_by_username(username) is not None:
        logger.warning("Rejected duplicate username=%s", username)
        raise UserAlreadyExistsError(username)

    user = repo.create_user(
        NewUser(username=username, password_hash=hash_password(password))
    )
    logger.info("Created user id=%d username=%s", user.id, user.username)
    return user


def get_user(repo: UserRepo, user_id: int) -> User | None:
    return repo.get_user(user_id)
