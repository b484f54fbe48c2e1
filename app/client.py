from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from app.errors import (
    ApiClientError,
    DuplicateKeyError,
    NotFoundError,
    OptimisticLockError,
    UserStoreError,
    ValidationError,
)
from app.models import User

logger = logging.getLogger("user_record_store.client")


def _error_from_response(resp: requests.Response) -> UserStoreError:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    kind = str(body.get("error") or "")
    detail = body.get("detail")
    message = detail if isinstance(detail, str) and detail else f"HTTP {resp.status_code}"

    if resp.status_code == 400:
        return ValidationError(message)
    if resp.status_code == 404:
        return NotFoundError(message)
    if resp.status_code == 409:
        if kind == OptimisticLockError.code:
            return OptimisticLockError(message)
        return DuplicateKeyError(message)
    return ApiClientError(message, details={"status_code": resp.status_code})


class UserApiClient:
    """Small typed client for the /user HTTP API.

    Error responses come back as the same exception types the store raises,
    so callers can write one retry loop regardless of which side they run on.

    The optional `session` param exists for testing/injection.
    """

    def __init__(self, base_url: str, *, timeout_seconds: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, *, json: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(method, url, json=json, timeout=self.timeout_seconds)
        except requests.exceptions.RequestException as e:
            raise ApiClientError(f"Request failed: {e.__class__.__name__}", details={"url": url}) from e
        if resp.status_code >= 400:
            raise _error_from_response(resp)
        return resp

    def create(self, user: User) -> User:
        body = user.model_dump(exclude={"id", "version"})
        return User.model_validate(self._request("POST", "/user", json=body).json())

    def update(self, user: User) -> User:
        if not user.id:
            raise ValidationError("Cannot update a user without an id")
        resp = self._request("PUT", f"/user/{user.id}", json=user.model_dump())
        return User.model_validate(resp.json())

    def get(self, user_id: str) -> User:
        return User.model_validate(self._request("GET", f"/user/{user_id}").json())

    def list(self) -> List[User]:
        return [User.model_validate(x) for x in self._request("GET", "/user").json()]

    def count(self) -> int:
        return int(self._request("GET", "/user/count").json()["count"])

    def delete(self, user_id: str) -> None:
        self._request("DELETE", f"/user/{user_id}")

    def delete_all(self) -> None:
        self._request("DELETE", "/user")

    def update_with_retry(self, user_id: str, mutate: Callable[[User], None], *, attempts: int = 3) -> User:
        """Read-modify-write with optimistic retries.

        `mutate` is applied to a freshly read copy on every attempt. The last
        OptimisticLockError is re-raised once attempts run out. At least one
        attempt is always made.
        """
        attempts = max(1, attempts)
        attempt = 1
        while True:
            current = self.get(user_id)
            mutate(current)
            try:
                return self.update(current)
            except OptimisticLockError:
                logger.info("Version conflict on user %s (attempt %d/%d)", user_id, attempt, attempts)
                if attempt >= attempts:
                    raise
                attempt += 1
