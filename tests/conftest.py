from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _reset_settings(monkeypatch: pytest.MonkeyPatch):
    # Settings are cached via @lru_cache; clear so each test sees its own environment.
    for name in ("MAX_NOTE_CHARS", "SOAP_DEFAULT_OUTPUT_FORMAT", "APP_ENV"):
        if name in os.environ:
            monkeypatch.delenv(name)

    from app.core.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from app.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c
