"""Prometheus metrics middleware: instruments every HTTP request.

For each request:
  1. ACTIVE_REQUESTS goes up, and back down on completion
  2. REQUEST_COUNT is incremented by method / endpoint / status
  3. the duration is observed in REQUEST_DURATION

ENDPOINT LABEL
----------------
Most routes here carry a credential ID in the path
(/api/credentials/VC-2024-123456789).  Using the raw path as a label
would create one time series per credential, so the label is the
matched route template instead (/api/credentials/{credential_id}).
Unmatched paths (404s from the router) fall back to the raw path.
"""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from vc_demo.core.metrics import ACTIVE_REQUESTS, REQUEST_COUNT, REQUEST_DURATION

UNINSTRUMENTED_PATHS = frozenset({"/metrics"})


def _endpoint_label(request: Request) -> str:
    route = request.scope.get("route")
    path_format = getattr(route, "path_format", None)
    return path_format or request.url.path


def _record(request: Request, status_code: int, seconds: float) -> None:
    endpoint = _endpoint_label(request)
    REQUEST_COUNT.labels(
        method=request.method, endpoint=endpoint, status_code=str(status_code)
    ).inc()
    REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(seconds)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count and time every request except Prometheus scrapes."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNINSTRUMENTED_PATHS:
            return await call_next(request)

        status_code = 500
        started = time.monotonic()
        with ACTIVE_REQUESTS.track_inprogress():
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                _record(request, status_code, time.monotonic() - started)
        return response
