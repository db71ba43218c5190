from __future__ import annotations

import os
import sys
from pathlib import Path

# Ensure repo root is on sys.path so `import vc_demo` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time; keep the suite off the real data dir.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from vc_demo.api.dependencies import get_store  # noqa: E402
from vc_demo.db.json_files import JsonFileDB  # noqa: E402
from vc_demo.db.store import Store, file_store, in_memory_store  # noqa: E402
from vc_demo.main import app  # noqa: E402
from vc_demo.models.credential import NewCredential  # noqa: E402


@pytest.fixture
def store() -> Store:
    """Fresh in-memory store per test."""
    return in_memory_store()


@pytest.fixture(autouse=True)
def override_store(store: Store):
    """Route every request in the test to this test's store."""
    app.dependency_overrides[get_store] = lambda: store
    yield
    app.dependency_overrides.pop(get_store, None)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def file_db(data_dir: Path) -> JsonFileDB:
    return JsonFileDB(data_dir)


@pytest.fixture
def disk_store(data_dir: Path) -> Store:
    return file_store(str(data_dir))


# ---------------------------------------------------------------------------
# Credential helpers
# ---------------------------------------------------------------------------

JANE_DOE = {
    "fullName": "Jane Doe",
    "dob": "2000-01-01",
    "nationality": "UK",
    "idNumber": "X1",
    "kycStatus": "verified",
    "netWorth": 600000,
    "languages": ["English"],
}


def credential_payload(**overrides) -> dict:
    """POST /api/credentials body; Jane Doe unless overridden."""
    return {**JANE_DOE, **overrides}


def new_credential(**overrides) -> NewCredential:
    """Store-level input with credential_id and issue_date already set."""
    fields = dict(
        credential_id="VC-2024-1",
        full_name="Jane Doe",
        dob="2000-01-01",
        nationality="UK",
        id_number="X1",
        kyc_status="verified",
        net_worth=600000,
        languages=("English",),
        additional_info=None,
        issue_date="2024-01-15",
    )
    fields.update(overrides)
    return NewCredential(**fields)


def issue(client: TestClient, **overrides) -> dict:
    resp = client.post("/api/credentials", json=credential_payload(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()
