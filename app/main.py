from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.exception_handlers import register_exception_handlers
from app.api.schemas import HealthOut
from app.core.logging import setup_logging
from app.core.metrics import PrometheusMetricsMiddleware, metrics_router
from app.core.middleware.http_logging import HttpLoggingMiddleware
from app.core.settings import get_settings
from app.notes.router import router as notes_router

setup_logging()

logger = logging.getLogger("app.startup")


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Resolve settings at startup so invalid configuration fails fast instead of
        # on the first request.
        settings = get_settings()
        logger.info(
            "Application started",
            extra={"app_env": settings.app_env, "max_note_chars": settings.max_note_chars},
        )
        yield

    app = FastAPI(
        title="SOAP Note Parsing API",
        description=(
            "API for parsing, validating and normalizing clinical notes written in the SOAP "
            "(Subjective, Objective, Assessment, Plan) structure.\n\n"
            "Design principles:\n"
            "- Parsing is deterministic and structural only; no medical inference.\n"
            "- Invalid or unrecognized notes are reported as data, with itemized errors.\n"
            "- Logging and metrics avoid PHI by recording formats and counts, never note text."
        ),
        lifespan=lifespan,
        docs_url="/swagger",
        redoc_url="/docs",
        openapi_tags=[
            {
                "name": "health",
                "description": (
                    "Basic uptime and readiness checks for load balancers and monitoring."
                ),
            },
            {
                "name": "soap-notes",
                "description": (
                    "Detect the SOAP dialect of a note (`traditional-prefixed`, `tagged` or "
                    "`unknown`), extract and validate its sections, and render sections in "
                    "either canonical format."
                ),
            },
            {
                "name": "metrics",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description="Lightweight endpoint to verify the API process is running.",
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(notes_router)
    return app


app = create_app()
