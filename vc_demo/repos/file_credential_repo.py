"""JSON-file implementation of CredentialRepo."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Any

from vc_demo.db.json_files import CREDENTIALS, JsonFileDB, StorageError
from vc_demo.models.credential import (
    Credential,
    NewCredential,
    RevocationStatus,
    utc_today,
)


class FileCredentialRepo:
    """Satisfies the CredentialRepo Protocol using credentials.json.

    Every call re-reads the file, so several repo instances pointed at the
    same data directory see each other's writes.
    """

    def __init__(
        self, db: JsonFileDB, today: Callable[[], date] = utc_today
    ) -> None:
        self._db = db
        self._today = today

    def _load(self) -> list[Credential]:
        return [_record_to_credential(r) for r in self._db.read_collection(CREDENTIALS)]

    def create(self, data: NewCredential) -> Credential:
        record = self._db.insert(
            CREDENTIALS,
            lambda new_id: Credential.new(id=new_id, data=data).to_record(),
        )
        return _record_to_credential(record)

    def get_by_id(self, id: int) -> Credential | None:
        for credential in self._load():
            if credential.id == id:
                return credential
        return None

    def get_by_credential_id(self, credential_id: str) -> Credential | None:
        for credential in self._load():
            if credential.credential_id == credential_id:
                return credential
        return None

    def list_all(self) -> list[Credential]:
        return self._load()

    def revoke(self, credential_id: str, reason: str) -> Credential | None:
        # Read once, update the first match in place, write the whole array back.
        records = self._db.read_collection(CREDENTIALS)
        for index, record in enumerate(records):
            if record.get("credentialId") != credential_id:
                continue
            updated = _record_to_credential(record).revoke(
                on=self._today(), reason=reason
            )
            records[index] = updated.to_record()
            self._db.write_collection(CREDENTIALS, records)
            return updated
        return None

    def check_status(self, credential_id: str) -> RevocationStatus:
        return RevocationStatus.of(self.get_by_credential_id(credential_id))


def _record_to_credential(record: dict[str, Any]) -> Credential:
    try:
        return Credential.from_record(record)
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"malformed credential record: {e!r}") from e
