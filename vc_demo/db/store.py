"""Store selection and lifecycle.

The service keeps two collections (credentials, users) behind the
CredentialRepo / UserRepo protocols.  Which implementation backs them is
decided once, at startup, from STORAGE_BACKEND:

  memory — dicts in this process; everything is gone on restart.
           Used by the test suite and handy for quick demos.
  file   — JSON files under DATA_DIR (see vc_demo/db/json_files.py);
           survives restarts.

Both repos of the file backend share one JsonFileDB, which owns the
data directory and the counters file that allocates ids for both
collections.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from vc_demo.core.config import Settings
from vc_demo.db.json_files import JsonFileDB
from vc_demo.repos.credential_repo import CredentialRepo, InMemoryCredentialRepo
from vc_demo.repos.file_credential_repo import FileCredentialRepo
from vc_demo.repos.file_user_repo import FileUserRepo
from vc_demo.repos.user_repo import InMemoryUserRepo, UserRepo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Store:
    backend: str
    credentials: CredentialRepo
    users: UserRepo


def in_memory_store() -> Store:
    return Store(
        backend="memory",
        credentials=InMemoryCredentialRepo(),
        users=InMemoryUserRepo(),
    )


def file_store(data_dir: str) -> Store:
    db = JsonFileDB(data_dir)
    return Store(
        backend="file",
        credentials=FileCredentialRepo(db),
        users=FileUserRepo(db),
    )


def build_store(settings: Settings) -> Store:
    if settings.storage_backend == "memory":
        return in_memory_store()
    return file_store(settings.data_dir)


@asynccontextmanager
async def lifespan_store(app: FastAPI, settings: Settings) -> AsyncGenerator[None, None]:
    """Attach the configured store to app.state for the app's lifetime."""
    store = build_store(settings)
    app.state.store = store
    logger.info(
        "Store ready  backend=%s data_dir=%s",
        store.backend,
        settings.data_dir if store.backend == "file" else "-",
    )
    try:
        yield
    finally:
        logger.info("Store released  backend=%s", store.backend)
