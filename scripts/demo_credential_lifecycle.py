"""Demo: issue → disclose → revoke → refused disclosure, via TestClient.

Run with:
    python scripts/demo_credential_lifecycle.py

Uses the in-memory backend unless STORAGE_BACKEND is already set.
"""

from __future__ import annotations

import json
import os

os.environ.setdefault("STORAGE_BACKEND", "memory")

from fastapi.testclient import TestClient  # noqa: E402

from vc_demo.main import app  # noqa: E402
from vc_demo.services.disclosure_service import decode_proof  # noqa: E402

HOLDER = {
    "fullName": "Jane Doe",
    "dob": "1990-06-15",
    "nationality": "UK",
    "idNumber": "P1234567",
    "kycStatus": "verified",
    "netWorth": 750000,
    "languages": ["English", "French"],
}


def main() -> None:
    with TestClient(app) as client:
        # ── Step 1: issue ───────────────────────────────────────────────
        r = client.post("/api/credentials", json=HOLDER)
        cred = r.json()
        credential_id = cred["credentialId"]
        print(f"1. POST /api/credentials        → {r.status_code}  {credential_id}")

        # ── Step 2: selective disclosure with all three proofs ──────────
        r = client.post(
            "/api/verify-disclosure",
            json={
                "credentialId": credential_id,
                "disclosedFields": ["nationality"],
                "proofs": ["adult", "wealth", "kyc"],
            },
        )
        body = r.json()
        print(f"2. POST /api/verify-disclosure  → {r.status_code}")
        print(f"   disclosed: {body['verifiableCredential']['credentialSubject']}")
        for proof in body["zeroKnowledgeProofs"]:
            print(f"   {proof['type']:<20} {proof['status']:<8} {proof['claim']}")
        print(f"   decoded age proof: {json.dumps(decode_proof(body['zeroKnowledgeProofs'][0]['proof']))}")

        # ── Step 3: revoke ──────────────────────────────────────────────
        r = client.post(
            "/api/revoke",
            json={"credentialId": credential_id, "reason": "Document reported stolen"},
        )
        print(f"3. POST /api/revoke             → {r.status_code}  {r.json()['message']}")

        # ── Step 4: status check ────────────────────────────────────────
        r = client.get(f"/api/revocation-status/{credential_id}")
        status = r.json()
        print(
            f"4. GET  /api/revocation-status  → {r.status_code}  "
            f"isRevoked={status['isRevoked']} reason={status['revocationReason']!r}"
        )

        # ── Step 5: disclosure is now refused ───────────────────────────
        r = client.post(
            "/api/verify-disclosure",
            json={"credentialId": credential_id, "proofs": ["adult"]},
        )
        print(f"5. POST /api/verify-disclosure  → {r.status_code}  {r.json()['message']}")

    print("\nAll steps completed.")


if __name__ == "__main__":
    main()
