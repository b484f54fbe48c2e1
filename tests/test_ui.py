from __future__ import annotations

from pathlib import Path

import requests
from streamlit.testing.v1 import AppTest

from app.client import UserApiClient
from app.errors import ApiClientError
from app.models import User

UI_PATH = str(Path(__file__).resolve().parents[1] / "ui.py")


def test_delete_failure_is_shown_as_error(monkeypatch):
    def offline(*args, **kwargs):
        raise requests.exceptions.ConnectionError("down")

    def failing_delete(self, user_id):
        raise ApiClientError("Request failed: ConnectionError")

    monkeypatch.setattr(requests, "get", offline)
    monkeypatch.setattr(
        UserApiClient, "list", lambda self: [User(id="u-1", version=0, username="u1", email="e1", name="n1")]
    )
    monkeypatch.setattr(UserApiClient, "delete", failing_delete)

    at = AppTest.from_file(UI_PATH, default_timeout=30)
    at.run()
    assert not at.exception

    at.button(key="delete-u-1").click().run()

    assert not at.exception
    assert any("Request failed: ConnectionError" in e.value for e in at.error)
