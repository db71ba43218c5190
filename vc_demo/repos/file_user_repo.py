"""JSON-file implementation of UserRepo."""

from __future__ import annotations

from typing import Any

from vc_demo.db.json_files import USERS, JsonFileDB, StorageError
from vc_demo.models.user import NewUser, User


class FileUserRepo:
    """Satisfies the UserRepo Protocol using users.json."""

    def __init__(self, db: JsonFileDB) -> None:
        self._db = db

    def _load(self) -> list[User]:
        return [_record_to_user(r) for r in self._db.read_collection(USERS)]

    def get_user(self, id: int) -> User | None:
        return next((u for u in self._load() if u.id == id), None)

    def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self._load() if u.username == username), None)

    def create_user(self, data: NewUser) -> User:
        record = self._db.insert(
            USERS, lambda new_id: User.new(id=new_id, data=data).to_record()
        )
        return _record_to_user(record)


def _record_to_user(record: dict[str, Any]) -> User:
    try:
        return User.from_record(record)
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"malformed user record: {e!r}") from e
