from __future__ import annotations

from fastapi.testclient import TestClient

from app import deps
from app.main import app
from app.settings import Settings, get_settings


def test_settings_read_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("API_BASE_URL", "http://api.local:9000/")
    s = get_settings()
    assert s.log_level == "DEBUG"
    assert s.api_base_url == "http://api.local:9000"


def test_configz_reflects_overridden_settings():
    app.dependency_overrides[deps.get_settings_dep] = lambda: Settings(APP_NAME="custom-store")
    try:
        data = TestClient(app).get("/configz").json()
    finally:
        app.dependency_overrides.pop(deps.get_settings_dep, None)
    assert data["app_name"] == "custom-store"
