from __future__ import annotations

from typing import Any, Dict, Optional


class UserStoreError(Exception):
    """Base exception for all user record store errors."""

    code = "user_store_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ValidationError(UserStoreError):
    """A required field is missing; resubmit with corrected data."""

    code = "validation"


class DuplicateKeyError(UserStoreError):
    """Username or email already belongs to another record."""

    code = "duplicate_key"


class OptimisticLockError(UserStoreError):
    """The supplied version is stale; re-read the record and retry."""

    code = "optimistic_lock"


class NotFoundError(UserStoreError):
    code = "not_found"


class ApiClientError(UserStoreError):
    """Transport-level failure talking to the HTTP API."""

    code = "api_client"
