"""Request-scoped access to the store.

The store is built once in the app lifespan and hung on app.state.
Routers never touch app.state directly; they depend on these functions,
which the tests replace through app.dependency_overrides[get_store].
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from vc_demo.db.store import Store
from vc_demo.repos.credential_repo import CredentialRepo
from vc_demo.repos.user_repo import UserRepo


def get_store(request: Request) -> Store:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Store not initialized",
        )
    return store


def get_credential_repo(store: Annotated[Store, Depends(get_store)]) -> CredentialRepo:
    return store.credentials


def get_user_repo(store: Annotated[Store, Depends(get_store)]) -> UserRepo:
    return store.users


CredentialRepoDep = Annotated[CredentialRepo, Depends(get_credential_repo)]
UserRepoDep = Annotated[UserRepo, Depends(get_user_repo)]
