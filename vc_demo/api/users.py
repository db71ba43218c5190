from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from vc_demo.api.dependencies import UserRepoDep
from vc_demo.db.json_files import StorageError
from vc_demo.services import users_service

logger = logging.getLogger(__name__)

# Demo accounts kept in the same store as the credentials.
# Nothing is gated on them; there is no login.

router = APIRouter(prefix="/api/users", tags=["users"])


class UserOut(BaseModel):
    id: int
    username: str


class UserCreateIn(BaseModel):
    username: str
    password: str


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def post_user(payload: UserCreateIn, repo: UserRepoDep) -> UserOut:
    try:
        user = users_service.register_user(repo, payload.username, payload.password)
    except users_service.UserAlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="username already exists",
        ) from None
    except users_service.UserValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from None
    except StorageError:
        logger.exception("Creating user failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user",
        ) from None

    return UserOut(id=user.id, username=user.username)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, repo: UserRepoDep) -> UserOut:
    try:
        user = users_service.get_user(repo, user_id)
    except StorageError:
        logger.exception("Fetching user id=%d failed", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch user",
        ) from None

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserOut(id=user.id, username=user.username)
