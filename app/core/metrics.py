from __future__ import annotations

import time
from typing import cast

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

metrics_router = APIRouter(tags=["metrics"])

# IMPORTANT (healthcare safety):
# - Do not include identifiers or note content in metric labels.
# - Route label MUST be a route template (e.g. /notes/validate) or a fixed value.

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    labelnames=("method", "route", "status_code"),
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=("method", "route", "status_code"),
    # Parsing is CPU-bound and fast; upper buckets cover very large notes.
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

# Label values come from closed sets: format is a SOAP dialect, valid is "true"/"false".
soap_notes_parsed_total = Counter(
    "soap_notes_parsed_total",
    "SOAP notes parsed, by detected format and validity",
    labelnames=("format", "valid"),
)


def record_soap_parse(*, soap_format: str, is_valid: bool) -> None:
    soap_notes_parsed_total.labels(format=soap_format, valid=str(is_valid).lower()).inc()


def safe_route_label(request: Request) -> str:
    """
    Return a safe route label.

    Prefer the Starlette/FastAPI route template (e.g. /notes/validate).
    If routing didn't match (404) or is otherwise unavailable, return "unmatched"
    to avoid leaking arbitrary raw paths into label cardinality.
    """

    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if isinstance(path, str) and path:
        return path
    return "unmatched"


class PrometheusMetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            route_label = safe_route_label(request)
            method = request.method
            code = str(int(status_code))
            duration = time.perf_counter() - started
            http_requests_total.labels(method=method, route=route_label, status_code=code).inc()
            http_request_duration_seconds.labels(
                method=method, route=route_label, status_code=code
            ).observe(duration)


@metrics_router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    # Default registry; sufficient for single-process usage.
    payload = generate_latest()
    return Response(content=cast(bytes, payload), media_type=CONTENT_TYPE_LATEST)
