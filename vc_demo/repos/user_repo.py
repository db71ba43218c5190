from __future__ import annotations

from typing import Protocol

from vc_demo.models.user import NewUser, User


class UserRepo(Protocol):
    def get_user(self, id: int) -> User | None: ...
    def get_user_by_username(self, username: str) -> User | None: ...
    def create_user(self, data: NewUser) -> User: ...


class InMemoryUserRepo:
    def __init__(self) -> None:
        self._by_id: dict[int, User] = {}
        self._next_id = 1

    def get_user(self, id: int) -> User | None:
        return self._by_id.get(id)

    def get_user_by_username(self, username: str) -> User | None:
        for user in self._by_id.values():
            if user.username == username:
                return user
        return None

    def create_user(self, data: NewUser) -> User:
        # Username uniqueness is checked by users_service before this call.
        user = User.new(id=self._next_id, data=data)
        self._next_id += 1
        self._by_id[user.id] = user
        return user
