"""Contract tests run against both CredentialRepo implementations."""

from __future__ import annotations

from datetime import date

import pytest

from tests.conftest import new_credential
from vc_demo.db.json_files import JsonFileDB
from vc_demo.models.credential import RevocationStatus
from vc_demo.repos.credential_repo import CredentialRepo, InMemoryCredentialRepo
from vc_demo.repos.file_credential_repo import FileCredentialRepo


class _Clock:
    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def clock() -> _Clock:
    return _Clock(date(2024, 3, 1))


@pytest.fixture(params=["memory", "file"])
def repo(request: pytest.FixtureRequest, clock: _Clock, file_db: JsonFileDB) -> CredentialRepo:
    if request.param == "memory":
        return InMemoryCredentialRepo(today=clock)
    return FileCredentialRepo(file_db, today=clock)


def test_create_assigns_id_and_clears_revocation(repo: CredentialRepo) -> None:
    cred = repo.create(new_credential())
    assert cred.id == 1
    assert cred.revoked is False
    assert cred.revocation_date is None
    assert cred.revocation_reason is None


def test_create_allocates_sequential_ids(repo: CredentialRepo) -> None:
    ids = [repo.create(new_credential(credential_id=f"VC-2024-{n}")).id for n in range(3)]
    assert ids == [1, 2, 3]


def test_create_requires_credential_id(repo: CredentialRepo) -> None:
    with pytest.raises(ValueError, match="credential_id"):
        repo.create(new_credential(credential_id=None))


def test_lookup_by_credential_id_and_internal_id(repo: CredentialRepo) -> None:
    created = repo.create(new_credential(credential_id="VC-2024-7"))
    assert repo.get_by_credential_id("VC-2024-7") == created
    assert repo.get_by_id(created.id) == created
    assert repo.get_by_credential_id("VC-2024-8") is None
    assert repo.get_by_id(99) is None


def test_list_all_preserves_insertion_order(repo: CredentialRepo) -> None:
    for n in (3, 1, 2):
        repo.create(new_credential(credential_id=f"VC-2024-{n}"))
    assert [c.credential_id for c in repo.list_all()] == [
        "VC-2024-3",
        "VC-2024-1",
        "VC-2024-2",
    ]


def test_duplicate_credential_id_is_not_rejected(repo: CredentialRepo) -> None:
    first = repo.create(new_credential(credential_id="VC-2024-1", full_name="First"))
    repo.create(new_credential(credential_id="VC-2024-1", full_name="Second"))

    assert len(repo.list_all()) == 2
    assert repo.get_by_credential_id("VC-2024-1") == first


def test_revoke_sets_all_three_fields(repo: CredentialRepo) -> None:
    repo.create(new_credential(credential_id="VC-2024-1"))

    revoked = repo.revoke("VC-2024-1", "Key compromise")

    assert revoked is not None
    assert revoked.revoked is True
    assert revoked.revocation_date == "2024-03-01"
    assert revoked.revocation_reason == "Key compromise"
    assert repo.get_by_credential_id("VC-2024-1") == revoked


def test_revoke_unknown_returns_none(repo: CredentialRepo) -> None:
    assert repo.revoke("VC-2024-404", "nope") is None
    assert repo.list_all() == []


def test_second_revoke_overwrites_date_and_reason(
    repo: CredentialRepo, clock: _Clock
) -> None:
    repo.create(new_credential(credential_id="VC-2024-1"))
    repo.revoke("VC-2024-1", "first")

    clock.today = date(2024, 4, 15)
    again = repo.revoke("VC-2024-1", "second")

    assert again is not None
    assert again.revoked is True
    assert again.revocation_date == "2024-04-15"
    assert again.revocation_reason == "second"


def test_revoke_leaves_other_records_untouched(repo: CredentialRepo) -> None:
    other = repo.create(new_credential(credential_id="VC-2024-1"))
    repo.create(new_credential(credential_id="VC-2024-2"))

    repo.revoke("VC-2024-2", "gone")

    assert repo.get_by_credential_id("VC-2024-1") == other


def test_check_status_mirrors_record(repo: CredentialRepo) -> None:
    repo.create(new_credential(credential_id="VC-2024-1"))
    assert repo.check_status("VC-2024-1") == RevocationStatus(is_revoked=False)

    repo.revoke("VC-2024-1", "stolen")
    assert repo.check_status("VC-2024-1") == RevocationStatus(
        is_revoked=True, revocation_date="2024-03-01", revocation_reason="stolen"
    )


def test_check_status_unknown_is_not_revoked(repo: CredentialRepo) -> None:
    assert repo.check_status("VC-2024-unknown") == RevocationStatus(is_revoked=False)


def test_revocation_date_never_precedes_issue_date(
    repo: CredentialRepo, clock: _Clock
) -> None:
    repo.create(new_credential(credential_id="VC-2024-7", issue_date="2024-06-30"))

    revoked = repo.revoke("VC-2024-7", "issued ahead of time")

    assert revoked is not None
    assert clock.today < date(2024, 6, 30)
    assert revoked.revocation_date == "2024-06-30"
    assert repo.check_status("VC-2024-7").revocation_date == "2024-06-30"
