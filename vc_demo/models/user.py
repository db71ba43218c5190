from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class NewUser:
    username: str
    password_hash: str  # argon2 encoded string, never the plaintext


@dataclass(frozen=True, slots=True)
class User:
    id: int
    username: str
    password_hash: str

    @staticmethod
    def new(*, id: int, data: NewUser) -> User:
        return User(id=id, username=data.username, password_hash=data.password_hash)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "passwordHash": self.password_hash,
        }

    @staticmethod
    def from_record(record: dict[str, Any]) -> User:
        return User(
            id=int(record["id"]),
            username=record["username"],
            password_hash=record["passwordHash"],
        )
