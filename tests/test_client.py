from __future__ import annotations

import pytest
import requests
from fastapi.testclient import TestClient

from app import deps
from app.client import UserApiClient
from app.errors import ApiClientError, DuplicateKeyError, NotFoundError, OptimisticLockError, ValidationError
from app.main import app
from app.models import User
from app.user_store import InMemoryUserStore


@pytest.fixture
def api():
    store = InMemoryUserStore()
    app.dependency_overrides[deps.get_user_store] = lambda: store
    try:
        # TestClient speaks the same request()/json() surface the client relies on.
        yield UserApiClient("http://testserver", session=TestClient(app))
    finally:
        app.dependency_overrides.pop(deps.get_user_store, None)


def test_client_crud(api):
    created = api.create(User(username="u1", email="e1", name="n1"))
    assert created.version == 0
    assert api.get(created.id) == created
    assert api.count() == 1

    created.name = "n2"
    updated = api.update(created)
    assert updated.version == 1
    assert [u.name for u in api.list()] == ["n2"]

    api.delete(created.id)
    api.delete(created.id)
    assert api.count() == 0


def test_client_maps_errors_to_store_exceptions(api):
    created = api.create(User(username="u1", email="e1"))

    with pytest.raises(ValidationError):
        api.create(User(username="", email="e2"))
    with pytest.raises(DuplicateKeyError):
        api.create(User(username="u1", email="e2"))
    with pytest.raises(NotFoundError):
        api.get("missing")

    api.update(created)
    with pytest.raises(OptimisticLockError):
        api.update(created)


def test_update_without_id_is_rejected_locally(api):
    with pytest.raises(ValidationError):
        api.update(User(username="u", email="e"))


def test_update_with_retry_recovers_from_conflict(api):
    created = api.create(User(username="u1", email="e1", name="start"))
    calls = {"n": 0}

    def mutate(u: User) -> None:
        calls["n"] += 1
        if calls["n"] == 1:
            # Another writer sneaks in between our read and our write.
            other = api.get(created.id)
            other.name = "other"
            api.update(other)
        u.name = "mine"

    result = api.update_with_retry(created.id, mutate)
    assert calls["n"] == 2
    assert result.name == "mine"
    assert result.version == 2


def test_update_with_retry_gives_up(api):
    created = api.create(User(username="u1", email="e1"))

    def always_conflict(u: User) -> None:
        other = api.get(created.id)
        api.update(other)

    with pytest.raises(OptimisticLockError):
        api.update_with_retry(created.id, always_conflict, attempts=2)


def test_transport_errors_become_api_client_error():
    class BrokenSession:
        def request(self, method, url, **kwargs):
            raise requests.exceptions.ConnectionError("down")

    c = UserApiClient("http://nowhere", session=BrokenSession())  # type: ignore[arg-type]
    with pytest.raises(ApiClientError):
        c.count()


def test_update_with_retry_makes_one_attempt_when_attempts_not_positive(api):
    created = api.create(User(username="u1", email="e1"))
    calls = {"n": 0}

    def conflict(u: User) -> None:
        calls["n"] += 1
        api.update(api.get(created.id))

    with pytest.raises(OptimisticLockError):
        api.update_with_retry(created.id, conflict, attempts=0)
    assert calls["n"] == 1


def test_update_with_retry_zero_attempts_still_succeeds_without_conflict(api):
    created = api.create(User(username="u1", email="e1", name="a"))

    def rename(u: User) -> None:
        u.name = "b"

    result = api.update_with_retry(created.id, rename, attempts=0)
    assert result.name == "b"
    assert result.version == 1
