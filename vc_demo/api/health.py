"""Health and readiness endpoints.

  /health (liveness)  — "is the process up?"  Always 200; the body says
                        whether the store can currently be read.
  /ready  (readiness) — "can it serve credential requests?"  503 when the
                        store cannot be read (e.g. credentials.json was
                        hand-edited into invalid JSON).

Readiness reads the credentials collection, which for the file backend
is a full file read.  Fine at demo scale.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from vc_demo.api.dependencies import get_store
from vc_demo.db.json_files import StorageError
from vc_demo.db.store import Store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _storage_check(store: Store) -> str:
    try:
        store.credentials.list_all()
    except StorageError:
        logger.warning("Storage check failed  backend=%s", store.backend)
        return "degraded"
    return "ok"


@router.get("/health")
def health(store: Annotated[Store, Depends(get_store)]) -> dict:
    storage = _storage_check(store)
    return {
        "status": "ok" if storage == "ok" else "degraded",
        "checks": {"storage": storage},
        "backend": store.backend,
    }


@router.get("/ready")
def ready(store: Annotated[Store, Depends(get_store)]) -> Response:
    if _storage_check(store) != "ok":
        return Response(status_code=503)
    return Response(status_code=200)
