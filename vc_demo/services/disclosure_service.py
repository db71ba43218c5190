"""Selective disclosure with mock zero-knowledge proofs.

SELECTIVE DISCLOSURE
----------------------
A verifier rarely needs the whole credential.  A bar needs "over 18",
a lender needs "net worth above X", neither needs the passport number.
disclose() builds a W3C-shaped Verifiable Credential that carries only
the fields the holder chose to reveal, plus credentialId and issueDate,
which are always present so the verifier can reference the credential
and check revocation.

MOCK PROOFS — READ THIS BEFORE REUSING ANY OF IT
--------------------------------------------------
A real zero-knowledge proof lets the verifier check a statement
("age > 18") against a commitment signed by the issuer, without ever
seeing the underlying value.  Nothing here does that.  Each "proof" is
the issuer-side boolean result, JSON-encoded and base64'd:

    base64('{"verified":true}')  ->  "eyJ2ZXJpZmllZCI6dHJ1ZX0="

Anyone can forge one.  The same goes for the envelope's ``jws``, which
is a fixed placeholder string.  The shapes are realistic so the UI can
render them; the cryptography is absent on purpose.

PROOF RULES
-------------
  adult   age = today.year - dob.year; verified when age > 18, or when
          age == 18 and both today.month >= dob.month and
          today.day >= dob.day.  The month and day are compared
          separately, so a few dates just past an 18th birthday still
          come out "not verified".  Kept as-is for compatibility.
  wealth  netWorth >= threshold (default 500,000).
  kyc     kycStatus == "verified", case-sensitive.

Proofs are always emitted in the order adult, wealth, kyc, whatever
order they were requested in.
"""

from __future__ import annotations

import base64
import json
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

from vc_demo.core.metrics import DISCLOSURES, PROOFS_GENERATED
from vc_demo.models.credential import Credential, RevocationStatus, utc_today

logger = logging.getLogger(__name__)

DEFAULT_NET_WORTH_THRESHOLD = 500_000

VC_CONTEXT = [
    "https://www.w3.org/2018/credentials/v1",
    "https://www.w3.org/2018/credentials/examples/v1",
]
VC_TYPE = ["VerifiableCredential", "IdentityCredential"]
ISSUER = "https://demo-bank-authority.example"
VERIFICATION_METHOD = f"{ISSUER}/keys/1"
SIGNATURE_TYPE = "Ed25519Signature2020"
# Placeholder, not a signature over anything.
PLACEHOLDER_JWS = (
    "eyJhbGciOiJFZERTQSIsImI2NCI6ZmFsc2UsImNyaXQiOlsiYjY0Il19.."
    "YtqjEYnFENT7fNW-COD0HAACxeuQxPKAmp4nIl8jYyUx_GZC-X1IaRMm5-Xv__YKRI6i_2cfCIFtkp1swkaYBw"
)

PROOF_ADULT = "adult"
PROOF_WEALTH = "wealth"
PROOF_KYC = "kyc"

STATUS_VERIFIED = "verified"
STATUS_NOT_VERIFIED = "not verified"


class CredentialRevokedError(Exception):
    """Disclosure refused: the credential has been revoked."""

    def __init__(self, credential_id: str, status: RevocationStatus) -> None:
        super().__init__(f"credential {credential_id} is revoked")
        self.credential_id = credential_id
        self.status = status


@dataclass(frozen=True, slots=True)
class ZkProof:
    type: str  # AgeVerification|WealthVerification|KYCVerification
    claim: str
    status: str  # verified|not verified
    proof: str  # base64 of {"verified": bool}

    @property
    def verified(self) -> bool:
        return self.status == STATUS_VERIFIED

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.type,
            "claim": self.claim,
            "status": self.status,
            "proof": self.proof,
        }


@dataclass(frozen=True, slots=True)
class DisclosureResult:
    verifiable_credential: dict[str, Any]
    zero_knowledge_proofs: list[ZkProof] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------


def encode_proof(verified: bool) -> str:
    payload = json.dumps({"verified": verified}, separators=(",", ":"))
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def decode_proof(proof: str) -> bool:
    """Inverse of encode_proof.  Raises ValueError on anything else."""
    try:
        payload = json.loads(base64.b64decode(proof, validate=True))
    except (ValueError, TypeError) as e:
        raise ValueError(f"not a mock proof payload: {proof!r}") from e
    if not isinstance(payload, dict) or not isinstance(payload.get("verified"), bool):
        raise ValueError(f"not a mock proof payload: {proof!r}")
    return payload["verified"]


def subject_did(full_name: str) -> str:
    return "did:example:" + re.sub(r"\s+", ".", full_name.lower())


def format_amount(amount: int | float) -> str:
    """500000 -> '500,000'; whole floats drop their '.0'."""
    if isinstance(amount, float) and amount.is_integer():
        amount = int(amount)
    return f"{amount:,}"


def is_adult(dob: date, today: date) -> bool:
    age = today.year - dob.year
    return age > 18 or (
        age == 18 and today.month >= dob.month and today.day >= dob.day
    )


def _make_proof(type_: str, claim: str, verified: bool) -> ZkProof:
    return ZkProof(
        type=type_,
        claim=claim,
        status=STATUS_VERIFIED if verified else STATUS_NOT_VERIFIED,
        proof=encode_proof(verified),
    )


def prove_adult(credential: Credential, today: date) -> ZkProof:
    verified = is_adult(date.fromisoformat(credential.dob), today)
    return _make_proof("AgeVerification", "Subject is over 18 years old", verified)


def prove_wealth(credential: Credential, threshold: int | float | None) -> ZkProof:
    if threshold is None:
        threshold = DEFAULT_NET_WORTH_THRESHOLD
    return _make_proof(
        "WealthVerification",
        f"Subject net worth exceeds ${format_amount(threshold)}",
        credential.net_worth >= threshold,
    )


def prove_kyc(credential: Credential) -> ZkProof:
    return _make_proof(
        "KYCVerification",
        "Subject has completed KYC verification",
        credential.kyc_status == "verified",
    )


def project_fields(
    credential: Credential, disclosed_fields: Iterable[str]
) -> dict[str, Any]:
    """credentialId + issueDate, then each requested field the record has."""
    record = credential.to_record()
    disclosed: dict[str, Any] = {
        "credentialId": credential.credential_id,
        "issueDate": credential.issue_date,
    }
    for name in disclosed_fields:
        if name in record:
            disclosed[name] = record[name]
    return disclosed


def generate_proofs(
    credential: Credential,
    requested: Iterable[str],
    *,
    net_worth_threshold: int | float | None,
    today: date,
) -> list[ZkProof]:
    wanted = set(requested)
    proofs: list[ZkProof] = []

    # A proof whose source attribute is missing is skipped, not failed.
    if PROOF_ADULT in wanted and credential.dob:
        proofs.append(prove_adult(credential, today))
    if PROOF_WEALTH in wanted and credential.net_worth is not None:
        proofs.append(prove_wealth(credential, net_worth_threshold))
    if PROOF_KYC in wanted and credential.kyc_status:
        proofs.append(prove_kyc(credential))

    for p in proofs:
        PROOFS_GENERATED.labels(type=p.type, status=p.status).inc()
    return proofs


def _iso_millis(moment: datetime) -> str:
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def disclose(
    credential: Credential,
    disclosed_fields: Iterable[str] = (),
    proofs: Iterable[str] = (),
    net_worth_threshold: int | float | None = None,
    *,
    today: date | None = None,
    now: datetime | None = None,
) -> DisclosureResult:
    """Build the selective-disclosure response for one credential.

    Raises CredentialRevokedError before doing anything else when the
    credential is revoked.  Reads nothing from the store and writes
    nothing; ``today`` / ``now`` default to the current UTC date and time.
    """
    status = RevocationStatus.of(credential)
    if status.is_revoked:
        DISCLOSURES.labels(outcome="refused_revoked").inc()
        logger.warning(
            "Disclosure refused: credential_id=%s revoked on %s",
            credential.credential_id,
            status.revocation_date,
            extra={"credential_id": credential.credential_id},
        )
        raise CredentialRevokedError(credential.credential_id, status)

    if today is None:
        today = utc_today()
    if now is None:
        now = datetime.now(timezone.utc)

    disclosed = project_fields(credential, disclosed_fields)
    zk_proofs = generate_proofs(
        credential, proofs, net_worth_threshold=net_worth_threshold, today=today
    )

    verifiable_credential: dict[str, Any] = {
        "@context": list(VC_CONTEXT),
        "id": credential.credential_id,
        "type": list(VC_TYPE),
        "issuer": ISSUER,
        "issuanceDate": credential.issue_date,
        "credentialSubject": {"id": subject_did(credential.full_name), **disclosed},
        "proof": {
            "type": SIGNATURE_TYPE,
            "created": _iso_millis(now),
            "verificationMethod": VERIFICATION_METHOD,
            "proofPurpose": "assertionMethod",
            "jws": PLACEHOLDER_JWS,
        },
    }

    DISCLOSURES.labels(outcome="disclosed").inc()
    logger.info(
        "Disclosed credential_id=%s fields=%s proofs=%s",
        credential.credential_id,
        sorted(set(disclosed) - {"credentialId", "issueDate"}),
        [p.type for p in zk_proofs],
        extra={"credential_id": credential.credential_id},
    )
    return DisclosureResult(
        verifiable_credential=verifiable_credential,
        zero_knowledge_proofs=zk_proofs,
    )
