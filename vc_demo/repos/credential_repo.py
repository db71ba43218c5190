from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Protocol

from vc_demo.models.credential import (
    Credential,
    NewCredential,
    RevocationStatus,
    utc_today,
)


class CredentialRepo(Protocol):
    def create(self, data: NewCredential) -> Credential: ...
    def get_by_id(self, id: int) -> Credential | None: ...
    def get_by_credential_id(self, credential_id: str) -> Credential | None: ...
    def list_all(self) -> list[Credential]: ...
    def revoke(self, credential_id: str, reason: str) -> Credential | None: ...
    def check_status(self, credential_id: str) -> RevocationStatus: ...


class InMemoryCredentialRepo:
    def __init__(self, today: Callable[[], date] = utc_today) -> None:
        # Insertion-ordered; keyed by internal id.
        self._by_id: dict[int, Credential] = {}
        self._next_id = 1
        self._today = today

    def create(self, data: NewCredential) -> Credential:
        # credential_id uniqueness is the caller's job; see DESIGN.md.
        credential = Credential.new(id=self._next_id, data=data)
        self._next_id += 1
        self._by_id[credential.id] = credential
        return credential

    def get_by_id(self, id: int) -> Credential | None:
        return self._by_id.get(id)

    def get_by_credential_id(self, credential_id: str) -> Credential | None:
        # Linear scan, first match wins.
        for credential in self._by_id.values():
            if credential.credential_id == credential_id:
                return credential
        return None

    def list_all(self) -> list[Credential]:
        return list(self._by_id.values())

    def revoke(self, credential_id: str, reason: str) -> Credential | None:
        credential = self.get_by_credential_id(credential_id)
        if credential is None:
            return None

        updated = credential.revoke(on=self._today(), reason=reason)
        self._by_id[credential.id] = updated
        return updated

    def check_status(self, credential_id: str) -> RevocationStatus:
        return RevocationStatus.of(self.get_by_credential_id(credential_id))
