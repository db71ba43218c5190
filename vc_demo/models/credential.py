from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Any


# attribute name -> camelCase key used in JSON files and API payloads.
# Order matches the record layout written to credentials.json.
RECORD_KEYS: dict[str, str] = {
    "id": "id",
    "credential_id": "credentialId",
    "full_name": "fullName",
    "dob": "dob",
    "nationality": "nationality",
    "id_number": "idNumber",
    "kyc_status": "kycStatus",
    "net_worth": "netWorth",
    "languages": "languages",
    "additional_info": "additionalInfo",
    "issue_date": "issueDate",
    "revoked": "revoked",
    "revocation_date": "revocationDate",
    "revocation_reason": "revocationReason",
}


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


@dataclass(frozen=True, slots=True)
class NewCredential:
    """Issuance input: every credential attribute the caller supplies.

    credential_id and issue_date may be left as None here; the issuance
    service fills them in before the record reaches a store.
    """

    full_name: str
    dob: str  # YYYY-MM-DD
    nationality: str
    id_number: str
    kyc_status: str  # verified|pending|rejected
    net_worth: int
    languages: tuple[str, ...]
    additional_info: str | None = None
    credential_id: str | None = None
    issue_date: str | None = None  # YYYY-MM-DD


@dataclass(frozen=True, slots=True)
class Credential:
    """Stored credential record.

    Created once by a store's create(); afterwards only revoke() produces a
    new value, setting revoked / revocation_date / revocation_reason
    together.
    """

    id: int
    credential_id: str
    full_name: str
    dob: str
    nationality: str
    id_number: str
    kyc_status: str
    net_worth: int
    languages: tuple[str, ...]
    additional_info: str | None
    issue_date: str
    revoked: bool = False
    revocation_date: str | None = None
    revocation_reason: str | None = None

    @staticmethod
    def new(*, id: int, data: NewCredential) -> Credential:
        if not data.credential_id:
            raise ValueError("credential_id is required")
        if not data.issue_date:
            raise ValueError("issue_date is required")
        return Credential(
            id=id,
            credential_id=data.credential_id,
            full_name=data.full_name,
            dob=data.dob,
            nationality=data.nationality,
            id_number=data.id_number,
            kyc_status=data.kyc_status,
            net_worth=data.net_worth,
            languages=tuple(data.languages),
            additional_info=data.additional_info or None,
            issue_date=data.issue_date,
        )

    def revoke(self, *, on: date, reason: str) -> Credential:
        # No guard against re-revoking: a second call overwrites date and reason.
        # A credential is never revoked before it was issued.
        on = max(on, date.fromisoformat(self.issue_date))
        return replace(
            self,
            revoked=True,
            revocation_date=on.isoformat(),
            revocation_reason=reason,
        )

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {}
        for attr, key in RECORD_KEYS.items():
            value = getattr(self, attr)
            record[key] = list(value) if attr == "languages" else value
        return record

    @staticmethod
    def from_record(record: dict[str, Any]) -> Credential:
        return Credential(
            id=int(record["id"]),
            credential_id=record["credentialId"],
            full_name=record["fullName"],
            dob=record["dob"],
            nationality=record["nationality"],
            id_number=record["idNumber"],
            kyc_status=record["kycStatus"],
            net_worth=record["netWorth"],
            languages=tuple(record["languages"]),
            additional_info=record.get("additionalInfo"),
            issue_date=record["issueDate"],
            revoked=bool(record.get("revoked", False)),
            revocation_date=record.get("revocationDate"),
            revocation_reason=record.get("revocationReason"),
        )


@dataclass(frozen=True, slots=True)
class RevocationStatus:
    is_revoked: bool
    revocation_date: str | None = None
    revocation_reason: str | None = None

    @staticmethod
    def of(credential: Credential | None) -> RevocationStatus:
        # An unknown credential reports "not revoked" rather than not-found.
        if credential is None:
            return RevocationStatus(is_revoked=False)
        return RevocationStatus(
            is_revoked=credential.revoked,
            revocation_date=credential.revocation_date,
            revocation_reason=credential.revocation_reason,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"isRevoked": self.is_revoked}
        if self.revocation_date:
            out["revocationDate"] = self.revocation_date
        if self.revocation_reason:
            out["revocationReason"] = self.revocation_reason
        return out
