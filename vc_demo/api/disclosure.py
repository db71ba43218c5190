"""POST /api/verify-disclosure: selective disclosure + mock proofs.

Request:
  {"credentialId": "VC-...", "disclosedFields": ["fullName", ...],
   "proofs": ["adult", "wealth", "kyc"], "netWorthThreshold": 1000000}

Response (200):
  {"verifiableCredential": {...W3C envelope...},
   "zeroKnowledgeProofs": [{"type", "claim", "status", "proof"}, ...]}

A revoked credential is refused with 403 and the revocation status, so
the UI can show why.  See vc_demo/services/disclosure_service.py for what
the "proofs" are (and are not).
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from vc_demo.api.dependencies import CredentialRepoDep
from vc_demo.db.json_files import StorageError
from vc_demo.services import disclosure_service
from vc_demo.services.disclosure_service import CredentialRevokedError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["disclosure"])


class DisclosureIn(BaseModel):
    credentialId: str | None = None
    disclosedFields: list[str] = []
    proofs: list[str] = []
    netWorthThreshold: int | float | None = None


class ZkProofOut(BaseModel):
    type: str
    claim: str
    status: str
    proof: str


class DisclosureOut(BaseModel):
    verifiableCredential: dict[str, Any]
    zeroKnowledgeProofs: list[ZkProofOut]


_FAILED = "Failed to generate selective disclosure"


@router.post("/verify-disclosure", response_model=DisclosureOut)
def verify_disclosure(payload: DisclosureIn, repo: CredentialRepoDep) -> DisclosureOut:
    if not payload.credentialId:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Credential ID is required",
        )

    try:
        credential = repo.get_by_credential_id(payload.credentialId)
    except StorageError:
        logger.exception("Disclosure lookup failed credential_id=%s", payload.credentialId)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=_FAILED
        ) from None

    if credential is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Credential not found"
        )

    try:
        result = disclosure_service.disclose(
            credential,
            payload.disclosedFields,
            payload.proofs,
            payload.netWorthThreshold,
        )
    except CredentialRevokedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": "Cannot generate proof for a revoked credential",
                "revocationStatus": e.status.to_dict(),
            },
        ) from None
    except ValueError:
        # Stored dob that does not parse as an ISO date.
        logger.exception("Disclosure failed credential_id=%s", payload.credentialId)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=_FAILED
        ) from None

    return DisclosureOut(
        verifiableCredential=result.verifiable_credential,
        zeroKnowledgeProofs=[ZkProofOut(**p.to_dict()) for p in result.zero_knowledge_proofs],
    )
