from __future__ import annotations

import logging
import re
import secrets
from dataclasses import replace

from vc_demo.core.metrics import CREDENTIALS_ISSUED
from vc_demo.models.credential import Credential, NewCredential, utc_today
from vc_demo.repos.credential_repo import CredentialRepo

logger = logging.getLogger(__name__)

CREDENTIAL_ID_PATTERN = re.compile(r"^VC-\d{4}-\d{1,9}$")
_MAX_SUFFIX = 1_000_000_000


def generate_credential_id(year: int | None = None) -> str:
    """Return an identifier of the form VC-<year>-<0..999999999>.

    Random, not sequential, so collisions are possible but unlikely at
    demo scale.  The store does not reject duplicates.
    """
    if year is None:
        year = utc_today().year
    return f"VC-{year}-{secrets.randbelow(_MAX_SUFFIX)}"


def issue_credential(repo: CredentialRepo, data: NewCredential) -> Credential:
    if not data.credential_id:
        data = replace(data, credential_id=generate_credential_id())
    if not data.issue_date:
        data = replace(data, issue_date=utc_today().isoformat())

    credential = repo.create(data)
    CREDENTIALS_ISSUED.inc()
    logger.info(
        "Issued credential id=%d credential_id=%s kyc_status=%s",
        credential.id,
        credential.credential_id,
        credential.kyc_status,
        extra={"credential_id": credential.credential_id},
    )
    return credential


def list_credentials(repo: CredentialRepo) -> list[Credential]:
    return repo.list_all()


def get_credential(repo: CredentialRepo, credential_id: str) -> Credential | None:
    return repo.get_by_credential_id(credential_id)
