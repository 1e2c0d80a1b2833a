"""HTTP logging middleware for clinical-note endpoints.

Log *metadata only*: route template, method, status, duration and request size.
Note text arrives in request bodies and is PHI, so bodies, query strings and headers
are never logged. X-Request-ID is generated or propagated for correlation.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.core.metrics import safe_route_label

logger = logging.getLogger("app.http")

_REQUEST_ID_HEADER = "X-Request-ID"
_SAFE_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")


def _get_or_create_request_id(*, request: Request) -> str:
    """Return the caller's request id when it is safe to log, else a new UUID4 hex.

    Only a narrow character set and length is accepted, to avoid log injection.
    """

    candidate = request.headers.get(_REQUEST_ID_HEADER)
    if candidate and _SAFE_REQUEST_ID_PATTERN.fullmatch(candidate):
        return candidate
    return uuid.uuid4().hex


def _request_bytes(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    if raw is None or not raw.isdigit():
        return None
    return int(raw)


def _log_fields(
    *, request: Request, request_id: str, status_code: int, started: float
) -> dict[str, Any]:
    return {
        "request_id": request_id,
        "http_method": request.method,
        "request_path": safe_route_label(request),
        "status_code": status_code,
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
        "request_bytes": _request_bytes(request),
    }


class HttpLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one log record per request and set the X-Request-ID response header.

    The request id is stored on `request.state.request_id` so the notes service and
    exception handlers can correlate their own records without reading the body.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _get_or_create_request_id(request=request)
        started = time.perf_counter()
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:  # noqa: BLE001 - we must log unexpected exceptions with stack trace
            logger.exception(
                "Unhandled exception while processing request",
                extra=_log_fields(
                    request=request, request_id=request_id, status_code=500, started=started
                ),
            )
            raise

        response.headers[_REQUEST_ID_HEADER] = request_id
        logger.info(
            "Request completed",
            extra=_log_fields(
                request=request,
                request_id=request_id,
                status_code=response.status_code,
                started=started,
            ),
        )
        return response
