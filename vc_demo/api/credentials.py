"""Credential issuance and lookup endpoints.

- GET  /api/credentials                  — every stored credential
- GET  /api/credentials/{credential_id}  — one credential by its VC-... id
- POST /api/credentials                  — issue a new credential

Field names on the wire are camelCase, matching the JSON files and the
UI.  ``credentialId`` and ``issueDate`` may be omitted on POST; the
server then generates ``VC-<year>-<n>`` and uses today's (UTC) date.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Literal

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from vc_demo.api.dependencies import CredentialRepoDep
from vc_demo.db.json_files import StorageError
from vc_demo.models.credential import Credential, NewCredential, utc_today
from vc_demo.services import credential_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/credentials", tags=["credentials"])


# --- Request / Response schemas -------------------------------------------


class CredentialOut(BaseModel):
    id: int
    credentialId: str
    fullName: str
    dob: str
    nationality: str
    idNumber: str
    kycStatus: str
    netWorth: int
    languages: list[str]
    additionalInfo: str | None
    issueDate: str
    revoked: bool
    revocationDate: str | None
    revocationReason: str | None

    @staticmethod
    def from_model(credential: Credential) -> CredentialOut:
        return CredentialOut(**credential.to_record())


class CredentialCreateIn(BaseModel):
    credentialId: str | None = None
    fullName: str = Field(min_length=1)
    dob: date
    nationality: str = Field(min_length=1)
    idNumber: str = Field(min_length=1)
    kycStatus: Literal["verified", "pending", "rejected"]
    netWorth: int = Field(ge=0)
    languages: list[str] = Field(min_length=1)
    additionalInfo: str | None = None
    issueDate: date | None = None

    @field_validator("issueDate")
    @classmethod
    def _issue_date_not_in_future(cls, value: date | None) -> date | None:
        if value is not None and value > utc_today():
            raise ValueError("issueDate cannot be in the future")
        return value

    def to_new_credential(self) -> NewCredential:
        return NewCredential(
            credential_id=self.credentialId or None,
            full_name=self.fullName,
            dob=self.dob.isoformat(),
            nationality=self.nationality,
            id_number=self.idNumber,
            kyc_status=self.kycStatus,
            net_worth=self.netWorth,
            languages=tuple(self.languages),
            additional_info=self.additionalInfo or None,
            issue_date=self.issueDate.isoformat() if self.issueDate else None,
        )


# --- Endpoints --------------------------------------------------------------


@router.get("", response_model=list[CredentialOut])
def list_credentials(repo: CredentialRepoDep) -> list[CredentialOut]:
    try:
        credentials = credential_service.list_credentials(repo)
    except StorageError:
        logger.exception("Listing credentials failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch credentials",
        ) from None
    return [CredentialOut.from_model(c) for c in credentials]


@router.get("/{credential_id}", response_model=CredentialOut)
def get_credential(credential_id: str, repo: CredentialRepoDep) -> CredentialOut:
    try:
        credential = credential_service.get_credential(repo, credential_id)
    except StorageError:
        logger.exception("Fetching credential_id=%s failed", credential_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch credential",
        ) from None

    if credential is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Credential not found"
        )
    return CredentialOut.from_model(credential)


@router.post("", response_model=CredentialOut, status_code=status.HTTP_201_CREATED)
def create_credential(
    payload: CredentialCreateIn, repo: CredentialRepoDep
) -> CredentialOut:
    try:
        credential = credential_service.issue_credential(
            repo, payload.to_new_credential()
        )
    except StorageError:
        logger.exception("Issuing credential failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create credential",
        ) from None
    return CredentialOut.from_model(credential)
