"""Revocation: the one-way transition and the status view over the store.

Status is not stored separately; it is read off the credential record
each time.  An unknown credential reports ``isRevoked: false``.  Callers
that need to tell "unknown" from "active" must look the credential up
themselves (the revocation-status endpoint does, to attach the record
when it is revoked).
"""

from __future__ import annotations

import logging

from vc_demo.core.metrics import CREDENTIALS_REVOKED
from vc_demo.models.credential import Credential, RevocationStatus
from vc_demo.repos.credential_repo import CredentialRepo

logger = logging.getLogger(__name__)


def revoke_credential(
    repo: CredentialRepo, credential_id: str, reason: str
) -> Credential | None:
    """Mark the credential revoked.  Returns None if it does not exist.

    Revoking an already-revoked credential succeeds and replaces the
    stored date and reason.
    """
    previous = repo.get_by_credential_id(credential_id)
    credential = repo.revoke(credential_id, reason)
    if credential is None:
        logger.warning(
            "Revocation for unknown credential_id=%s",
            credential_id,
            extra={"credential_id": credential_id},
        )
        return None

    CREDENTIALS_REVOKED.inc()
    if previous is not None and previous.revoked:
        logger.info(
            "Re-revoked credential_id=%s (previous reason=%r, date=%s)",
            credential_id,
            previous.revocation_reason,
            previous.revocation_date,
            extra={"credential_id": credential_id},
        )
    else:
        logger.info(
            "Revoked credential_id=%s reason=%r",
            credential_id,
            reason,
            extra={"credential_id": credential_id},
        )
    return credential


def check_status(repo: CredentialRepo, credential_id: str) -> RevocationStatus:
    return repo.check_status(credential_id)


def revocation_report(
    repo: CredentialRepo, credential_id: str
) -> tuple[RevocationStatus, Credential | None]:
    """Status plus the full record, the record only when revoked."""
    status = repo.check_status(credential_id)
    if not status.is_revoked:
        return status, None
    return status, repo.get_by_credential_id(credential_id)
