"""Logging configuration for the credential demo service.

TWO OUTPUT MODES
------------------
  _ContainerFormatter — human-readable, single-line, for local dev.
    You read these with your eyes in a terminal while clicking through
    issue → disclose → revoke.

  _JsonFormatter — machine-parseable JSON Lines, for anything that ships
    logs to an aggregator.  Every request-scoped field the middleware
    attaches (request_id, path, status_code, ...) becomes a top-level
    key, so you can filter with

      credential_id == "VC-2024-123456789" AND level == "WARNING"

    instead of grepping free text.

    Set LOG_JSON=true to switch to JSON output.

WHAT GETS LOGGED
------------------
The lifecycle services log one INFO line per state change (issued,
revoked) and a WARNING for every refused disclosure.  Storage failures
are logged with a stack trace at the point where they are translated
into a 500, never in the response body.  See vc_demo/core/metrics.py for
the numeric counterpart of these events.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime

_NOISY_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "httpcore", "httpx")


def _timestamp(record: logging.LogRecord) -> str:
    """Local ISO-8601 with milliseconds and offset: 2024-05-05T12:00:00.123+00:00"""
    created = datetime.fromtimestamp(record.created).astimezone()
    return created.isoformat(timespec="milliseconds")


class _ContainerFormatter(logging.Formatter):
    """One line per record for a terminal or container stdout.

    ``<timestamp> <LEVEL> <logger>  <message>``, then ``(req=<id>)`` when
    the record belongs to a request, then ``[file:line]`` from WARNING up.
    Tracebacks follow on their own lines.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"{_timestamp(record)} {record.levelname:<8} {record.name}  "
            f"{record.getMessage()}"
        )

        request_id = getattr(record, "request_id", "-")
        if request_id != "-":
            line += f"  (req={request_id})"
        if record.levelno >= logging.WARNING:
            line += f"  [{record.filename}:{record.lineno}]"

        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


class _JsonFormatter(logging.Formatter):
    """JSON formatter: one object per line.

    Context fields are copied from the LogRecord when present.  The
    request-scoped ones come from RequestContextMiddleware; credential_id
    is passed via ``extra=`` by the lifecycle services.
    """

    _CONTEXT_FIELDS = (
        "request_id",
        "method",
        "path",
        "status_code",
        "duration_ms",
        "credential_id",
    )

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in self._CONTEXT_FIELDS
            if getattr(record, key, None) not in (None, "-")
        )
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level_name: str, *, json_format: bool = False) -> None:
    """Send every log record to stdout at ``level_name``.

    Unknown level names fall back to INFO.  Calling this again replaces
    the previous handler, so the app and the tests can both call it.
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_format else _ContainerFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Server and HTTP client chatter only from WARNING up.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
