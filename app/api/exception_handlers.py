from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.exceptions import BusinessValidationError, IncompleteSoapNoteError

logger = logging.getLogger("app.business_validation")


def _log_rejection(*, request: Request, status_code: int, error: str) -> None:
    # IMPORTANT: do not log request bodies (note text), query values, or any PHI.
    logger.info(
        "Business validation failed",
        extra={
            "request_id": getattr(request.state, "request_id", None)
            or request.headers.get("X-Request-ID"),
            "http_method": request.method,
            "request_path": request.url.path,  # no query string
            "status_code": status_code,
            "error": error,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers."""

    @app.exception_handler(BusinessValidationError)
    async def handle_business_validation_error(
        request: Request,
        exc: BusinessValidationError,
    ) -> JSONResponse:
        _log_rejection(request=request, status_code=400, error="business_validation")
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(IncompleteSoapNoteError)
    async def handle_incomplete_soap_note(
        request: Request,
        exc: IncompleteSoapNoteError,
    ) -> JSONResponse:
        # Error messages name sections only ("Plan section is missing or empty"); safe to return.
        _log_rejection(request=request, status_code=422, error="incomplete_soap_note")
        return JSONResponse(status_code=422, content={"detail": exc.message, "errors": exc.errors})
