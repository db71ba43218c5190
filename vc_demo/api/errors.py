"""Uniform JSON error bodies.

Every error response from /api/* has a ``message`` key:

  400  {"message": "Validation error: ..."}      bad / missing fields
  404  {"message": "Credential not found"}
  403  {"message": "...", "revocationStatus": {...}}
  500  {"message": "Failed to ..."}               no internal detail
  500  {"message": "Internal server error"}      anything unexpected

Routers raise HTTPException with either a string detail (wrapped as
{"message": detail}) or a dict detail (sent as-is, used for the 403).
FastAPI's default 422 for body validation is turned into a 400 here.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _location(loc: tuple | list) -> str:
    # ("body", "languages", 0) -> "languages.0"
    parts = [str(p) for p in loc if p != "body"]
    return ".".join(parts) or "body"


def format_validation_errors(errors: list[dict]) -> str:
    details = "; ".join(
        f'{err.get("msg", "Invalid value")} at "{_location(err.get("loc", ()))}"'
        for err in errors
    )
    return f"Validation error: {details}"


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = format_validation_errors(list(exc.errors()))
    logger.warning("Rejected request %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"message": message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
