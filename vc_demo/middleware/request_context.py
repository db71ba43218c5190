"""Request context middleware: tags every request with an ID.

A single disclosure call touches the router, the store and the
disclosure engine, and each of them may log.  The request ID ties those
lines together, and it is echoed back in the ``X-Request-ID`` response
header so a UI developer can quote it when a call misbehaves.

The ID lives in a ContextVar rather than a thread-local: FastAPI runs
async middleware on the event loop and sync endpoints in a threadpool,
and ContextVars follow the request across both.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class _RequestContextFilter(logging.Filter):
    """Stamp records that do not carry a request ID with the current one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()  # type: ignore[attr-defined]
        return True


def install_log_filter() -> None:
    """Attach the filter to the root handlers, once per handler."""
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, _RequestContextFilter) for f in handler.filters):
            handler.addFilter(_RequestContextFilter())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, time the request, log one summary line."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        started = time.monotonic()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s failed", request.method, request.url.path, extra=context
            )
            raise
        finally:
            request_id_var.reset(token)

        duration_ms = round((time.monotonic() - started) * 1000, 1)
        logger.info(
            "%s %s → %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                **context,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
