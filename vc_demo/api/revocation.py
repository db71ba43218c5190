"""Revocation endpoints.

- POST /api/revoke                                 — revoke with a reason
- GET  /api/revocation-status/{credential_id}      — current status

The status endpoint answers ``{"isRevoked": false}`` for an unknown id
as well as for an active credential.  The full credential record is
attached only when it is revoked.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from vc_demo.api.credentials import CredentialOut
from vc_demo.api.dependencies import CredentialRepoDep
from vc_demo.db.json_files import StorageError
from vc_demo.services import revocation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["revocation"])


class RevokeIn(BaseModel):
    credentialId: str | None = None
    reason: str | None = None


class RevokeOut(BaseModel):
    message: str
    credential: CredentialOut


class RevocationStatusOut(BaseModel):
    isRevoked: bool
    revocationDate: str | None = None
    revocationReason: str | None = None
    credential: CredentialOut | None = None


@router.post("/revoke", response_model=RevokeOut)
def revoke(payload: RevokeIn, repo: CredentialRepoDep) -> RevokeOut:
    if not payload.credentialId:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Credential ID is required",
        )
    if not payload.reason:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Revocation reason is required",
        )

    try:
        credential = revocation_service.revoke_credential(
            repo, payload.credentialId, payload.reason
        )
    except StorageError:
        logger.exception("Revocation failed credential_id=%s", payload.credentialId)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to revoke credential",
        ) from None

    if credential is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Credential not found"
        )
    return RevokeOut(
        message="Credential successfully revoked",
        credential=CredentialOut.from_model(credential),
    )


@router.get(
    "/revocation-status/{credential_id}",
    response_model=RevocationStatusOut,
    response_model_exclude_unset=True,
)
def revocation_status(credential_id: str, repo: CredentialRepoDep) -> RevocationStatusOut:
    try:
        status_, credential = revocation_service.revocation_report(repo, credential_id)
    except StorageError:
        logger.exception("Status check failed credential_id=%s", credential_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check revocation status",
        ) from None

    # Only set the optional keys that have values, so they are omitted
    # from the JSON instead of sent as null.
    fields: dict = status_.to_dict()
    if credential is not None:
        fields["credential"] = CredentialOut.from_model(credential)
    return RevocationStatusOut(**fields)
