"""Unit tests for the HTTP logging middleware.

We assert structured log fields via `caplog` (not message strings) and verify:
- X-Request-ID is generated or propagated
- Successful requests emit exactly one INFO log entry with metadata only
- Note text posted to the API never appears in any log record
- Unhandled exceptions emit an ERROR log entry with a stack trace and return 500
"""

from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.middleware.http_logging import HttpLoggingMiddleware
from app.notes.router import router as notes_router

_NOTE_TEXT = "S: Jane Roe reports chest pain\nO: BP 150/90\nA: angina\nP: ECG"


def _make_app() -> FastAPI:
    """Create a minimal app for middleware unit tests."""
    app = FastAPI()
    app.add_middleware(HttpLoggingMiddleware)
    app.include_router(notes_router)

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("boom")

    return app


def _get_http_log_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == "app.http"]


def test_successful_request_sets_request_id_and_logs_one_info(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """A parse request should emit one INFO http log with route metadata and X-Request-ID."""
    caplog.set_level(logging.INFO, logger="app.http")
    app = _make_app()

    with TestClient(app) as client:
        res = client.post("/notes/validate?source=Jane+Roe", json={"content_text": _NOTE_TEXT})

    assert res.status_code == 200
    assert res.headers["x-request-id"]

    info_records = [r for r in _get_http_log_records(caplog) if r.levelno == logging.INFO]
    assert len(info_records) == 1

    record = info_records[0]
    assert record.__dict__["request_id"] == res.headers["x-request-id"]
    assert record.__dict__["http_method"] == "POST"
    # Route template only; no query string values.
    assert record.__dict__["request_path"] == "/notes/validate"
    assert record.__dict__["status_code"] == 200
    # Body size is metadata; the body itself is not.
    assert record.__dict__["request_bytes"] > len(_NOTE_TEXT)

    duration_ms = record.__dict__["duration_ms"]
    assert isinstance(duration_ms, (int, float))
    assert duration_ms >= 0


def test_propagates_valid_request_id(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="app.http")
    app = _make_app()

    with TestClient(app) as client:
        res = client.post(
            "/notes/validate",
            json={"content_text": _NOTE_TEXT},
            headers={"X-Request-ID": "req_abc-123"},
        )

    assert res.headers["x-request-id"] == "req_abc-123"
    info_records = [r for r in _get_http_log_records(caplog) if r.levelno == logging.INFO]
    assert info_records[0].__dict__["request_id"] == "req_abc-123"


def test_replaces_unsafe_request_id() -> None:
    app = _make_app()

    with TestClient(app) as client:
        res = client.post(
            "/notes/validate",
            json={"content_text": _NOTE_TEXT},
            headers={"X-Request-ID": "bad id with spaces"},
        )

    assert res.headers["x-request-id"] != "bad id with spaces"
    assert len(res.headers["x-request-id"]) == 32


def test_note_text_is_never_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)
    app = _make_app()

    with TestClient(app) as client:
        client.post("/notes/validate", json={"content_text": _NOTE_TEXT})
        client.post("/notes/normalize", json={"content_text": _NOTE_TEXT, "format": "tagged"})

    assert caplog.records
    for record in caplog.records:
        rendered = " ".join(str(v) for v in record.__dict__.values())
        assert "Jane Roe" not in rendered
        assert "chest pain" not in rendered


def test_unhandled_exception_returns_500_and_logs_error_with_request_id(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Unhandled exceptions should return 500 and emit one ERROR log record with exc_info."""
    caplog.set_level(logging.INFO, logger="app.http")
    app = _make_app()

    with TestClient(app, raise_server_exceptions=False) as client:
        res = client.get("/boom", headers={"X-Request-ID": "req_err_001"})

    assert res.status_code == 500

    error_records = [r for r in _get_http_log_records(caplog) if r.levelno == logging.ERROR]
    assert len(error_records) == 1

    record = error_records[0]
    assert record.__dict__["request_id"] == "req_err_001"
    assert record.__dict__["request_path"] == "/boom"
    assert record.__dict__["status_code"] == 500
    assert record.exc_info
