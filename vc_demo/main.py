from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vc_demo.api.credentials import router as credentials_router
from vc_demo.api.disclosure import router as disclosure_router
from vc_demo.api.errors import register_exception_handlers
from vc_demo.api.health import router as health_router
from vc_demo.api.metrics_endpoint import router as metrics_router
from vc_demo.api.revocation import router as revocation_router
from vc_demo.api.users import router as users_router
from vc_demo.core.config import SETTINGS
from vc_demo.core.logging import setup_logging
from vc_demo.db.store import lifespan_store
from vc_demo.middleware.metrics import MetricsMiddleware
from vc_demo.middleware.request_context import RequestContextMiddleware, install_log_filter

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
install_log_filter()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    async with lifespan_store(app, SETTINGS):
        yield


# only app setup + router registration

app = FastAPI(
    title="vc-demo",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware execution order: last-added runs first (outermost layer).
# RequestContext (outermost) → Metrics → CORS → route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

register_exception_handlers(app)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(credentials_router)
app.include_router(disclosure_router)
app.include_router(revocation_router)
app.include_router(users_router)

logger.info(
    "vc-demo started  env=%s log_level=%s port=%d storage=%s docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    SETTINGS.storage_backend,
    "on" if SETTINGS.is_dev else "off",
)
