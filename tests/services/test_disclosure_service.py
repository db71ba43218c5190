from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone

import pytest

from tests.conftest import new_credential
from vc_demo.models.credential import Credential
from vc_demo.services import disclosure_service
from vc_demo.services.disclosure_service import (
    CredentialRevokedError,
    decode_proof,
    disclose,
    encode_proof,
    format_amount,
    is_adult,
    subject_did,
)

TODAY = date(2024, 6, 15)
NOW = datetime(2024, 6, 15, 9, 30, 0, 123000, tzinfo=timezone.utc)


def _credential(**overrides) -> Credential:
    return Credential.new(id=1, data=new_credential(**overrides))


def _proofs(credential: Credential, *tags: str, threshold=None):
    result = disclose(
        credential, proofs=tags, net_worth_threshold=threshold, today=TODAY, now=NOW
    )
    return result.zero_knowledge_proofs


# ---- adult ----


def test_adult_one_day_past_eighteenth_birthday() -> None:
    # 2006-06-14: age 18, month equal, day 15 >= 14
    (proof,) = _proofs(_credential(dob="2006-06-14"), "adult")
    assert proof.type == "AgeVerification"
    assert proof.claim == "Subject is over 18 years old"
    assert proof.status == "verified"


def test_adult_on_eighteenth_birthday() -> None:
    (proof,) = _proofs(_credential(dob="2006-06-15"), "adult")
    assert proof.status == "verified"


def test_adult_seventeen_years_old() -> None:
    (proof,) = _proofs(_credential(dob="2007-06-15"), "adult")
    assert proof.status == "not verified"


def test_adult_day_before_eighteenth_birthday() -> None:
    (proof,) = _proofs(_credential(dob="2006-06-16"), "adult")
    assert proof.status == "not verified"


def test_adult_nineteen_is_verified_regardless_of_month() -> None:
    (proof,) = _proofs(_credential(dob="2005-12-31"), "adult")
    assert proof.status == "verified"


@pytest.mark.parametrize(
    ("dob", "today", "expected"),
    [
        # Month and day are compared independently: past the birthday by
        # month, but today's day-of-month is smaller than the birth day.
        (date(2006, 3, 20), date(2024, 6, 15), False),
        (date(2006, 3, 10), date(2024, 6, 15), True),
        (date(2006, 9, 1), date(2024, 6, 15), False),
        (date(2000, 1, 1), date(2024, 6, 15), True),
    ],
)
def test_is_adult_month_day_rule(dob: date, today: date, expected: bool) -> None:
    assert is_adult(dob, today) is expected


# ---- wealth ----


def test_wealth_default_threshold_is_inclusive() -> None:
    (proof,) = _proofs(_credential(net_worth=500000), "wealth")
    assert proof.type == "WealthVerification"
    assert proof.status == "verified"
    assert proof.claim == "Subject net worth exceeds $500,000"


def test_wealth_just_below_default_threshold() -> None:
    (proof,) = _proofs(_credential(net_worth=499999), "wealth")
    assert proof.status == "not verified"


def test_wealth_explicit_threshold() -> None:
    (proof,) = _proofs(_credential(net_worth=750000), "wealth", threshold=1_250_000)
    assert proof.status == "not verified"
    assert proof.claim == "Subject net worth exceeds $1,250,000"


def test_wealth_zero_threshold_is_honoured() -> None:
    (proof,) = _proofs(_credential(net_worth=0), "wealth", threshold=0)
    assert proof.status == "verified"
    assert proof.claim == "Subject net worth exceeds $0"


def test_format_amount() -> None:
    assert format_amount(500000) == "500,000"
    assert format_amount(1000000.0) == "1,000,000"
    assert format_amount(1234.5) == "1,234.5"


# ---- kyc ----


def test_kyc_verified() -> None:
    (proof,) = _proofs(_credential(kyc_status="verified"), "kyc")
    assert proof.type == "KYCVerification"
    assert proof.claim == "Subject has completed KYC verification"
    assert proof.status == "verified"


@pytest.mark.parametrize("kyc_status", ["Verified", "pending", "rejected"])
def test_kyc_anything_else_is_not_verified(kyc_status: str) -> None:
    (proof,) = _proofs(_credential(kyc_status=kyc_status), "kyc")
    assert proof.status == "not verified"


# ---- proof list ----


def test_proofs_follow_fixed_order() -> None:
    proofs = _proofs(_credential(), "kyc", "wealth", "adult")
    assert [p.type for p in proofs] == [
        "AgeVerification",
        "WealthVerification",
        "KYCVerification",
    ]


def test_duplicate_and_unknown_tags() -> None:
    proofs = _proofs(_credential(), "kyc", "kyc", "zodiac")
    assert [p.type for p in proofs] == ["KYCVerification"]


def test_proof_payload_encodes_the_boolean() -> None:
    (verified,) = _proofs(_credential(kyc_status="verified"), "kyc")
    (rejected,) = _proofs(_credential(kyc_status="pending"), "kyc")
    assert verified.proof == encode_proof(True) == "eyJ2ZXJpZmllZCI6dHJ1ZX0="
    assert decode_proof(rejected.proof) is False


def test_decode_proof_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        decode_proof("not base64!")
    with pytest.raises(ValueError):
        decode_proof(encode_proof(True)[:-4])


# ---- projection & envelope ----


def test_subject_always_has_identifiers() -> None:
    result = disclose(_credential(), today=TODAY, now=NOW)
    assert result.verifiable_credential["credentialSubject"] == {
        "id": "did:example:jane.doe",
        "credentialId": "VC-2024-1",
        "issueDate": "2024-01-15",
    }


def test_projection_copies_values_verbatim() -> None:
    cred = _credential(languages=("German", "English"), additional_info="note")
    result = disclose(
        cred,
        ["languages", "additionalInfo", "netWorth", "nope"],
        today=TODAY,
        now=NOW,
    )
    subject = result.verifiable_credential["credentialSubject"]
    assert subject["languages"] == ["German", "English"]
    assert subject["additionalInfo"] == "note"
    assert subject["netWorth"] == 600000
    assert "nope" not in subject


def test_envelope_shape() -> None:
    vc = disclose(_credential(), today=TODAY, now=NOW).verifiable_credential
    assert vc["id"] == "VC-2024-1"
    assert vc["issuer"] == "https://demo-bank-authority.example"
    assert vc["issuanceDate"] == "2024-01-15"
    assert vc["proof"] == {
        "type": "Ed25519Signature2020",
        "created": "2024-06-15T09:30:00.123Z",
        "verificationMethod": "https://demo-bank-authority.example/keys/1",
        "proofPurpose": "assertionMethod",
        "jws": disclosure_service.PLACEHOLDER_JWS,
    }


def test_subject_did_collapses_whitespace() -> None:
    assert subject_did("Mary  Ann\tVan Dyke") == "did:example:mary.ann.van.dyke"


# ---- revocation precondition ----


def test_revoked_credential_is_refused() -> None:
    cred = _credential().revoke(on=date(2024, 2, 1), reason="fraud")
    with pytest.raises(CredentialRevokedError) as excinfo:
        disclose(cred, ["fullName"], ["adult"], today=TODAY, now=NOW)

    assert excinfo.value.credential_id == "VC-2024-1"
    assert excinfo.value.status.is_revoked is True
    assert excinfo.value.status.to_dict() == {
        "isRevoked": True,
        "revocationDate": "2024-02-01",
        "revocationReason": "fraud",
    }


def test_revocation_checked_before_parsing_dob() -> None:
    cred = replace(
        _credential(dob="garbage"),
        revoked=True,
        revocation_date="2024-02-01",
        revocation_reason="r",
    )
    with pytest.raises(CredentialRevokedError):
        disclose(cred, proofs=["adult"], today=TODAY, now=NOW)
