from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Set

from app.errors import DuplicateKeyError, NotFoundError, OptimisticLockError, ValidationError
from app.models import User


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationError(
                "Cannot be saved: username and email are required, but one or both is empty.",
                details={"fields": ",".join(self.errors)},
            )


def validate_user(user: User) -> ValidationResult:
    result = ValidationResult()
    if not user.username:
        result.errors.append("username")
    if not user.email:
        result.errors.append("email")
    return result


class InMemoryUserStore:
    """Thread-safe in-memory user record store.

    Records live in a single ``id -> User`` mapping. Username and email
    uniqueness is enforced by scanning that mapping; there is no secondary
    index. Updates are guarded by an optimistic lock: the caller must present
    the version it read, and every successful update bumps it by one.

    One lock guards every operation, so the check-then-commit sequence in
    :meth:`save` is atomic with respect to all other readers and writers.

    Records are copied on the way in and on the way out. Callers only ever
    hold snapshots.
    """

    def __init__(self, *, id_factory: Optional[Callable[[], str]] = None):
        self._lock = threading.Lock()
        self._users: Dict[str, User] = {}
        # Every id ever handed out, so deleted ids are never reissued.
        self._issued_ids: Set[str] = set()
        self._id_factory = id_factory or _new_id

    def validate(self, user: User) -> ValidationResult:
        return validate_user(user)

    def save(self, user: User) -> User:
        """Create or update ``user`` and return the stored snapshot.

        No id, or an id the store has never seen, creates a new record with a
        freshly generated id and version 0. A known id updates that record,
        provided ``user.version`` matches the stored version.

        Raises:
            ValidationError: username or email is empty.
            DuplicateKeyError: another record already has the username or email.
            OptimisticLockError: ``user.version`` is stale.
        """
        self.validate(user).raise_for_errors()

        with self._lock:
            if not user.id:
                return self._insert(user)

            current = self._users.get(user.id)
            if current is None:
                # Unknown ids degrade to a create; the supplied id is discarded.
                return self._insert(user)

            if current.version != user.version:
                raise OptimisticLockError(
                    "This record has already been updated earlier by another writer.",
                    details={
                        "id": user.id,
                        "expected_version": current.version,
                        "actual_version": user.version,
                    },
                )

            self._check_unique(user, exclude_id=user.id)
            updated = user.model_copy(update={"version": current.version + 1})
            self._users[updated.id] = updated
            return updated.model_copy()

    def _insert(self, user: User) -> User:
        # Caller holds the lock.
        self._check_unique(user, exclude_id=None)
        created = user.model_copy(update={"id": self._generate_id(), "version": 0})
        self._users[created.id] = created
        return created.model_copy()

    def _generate_id(self) -> str:
        while True:
            candidate = self._id_factory()
            if candidate and candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate

    def _check_unique(self, user: User, *, exclude_id: Optional[str]) -> None:
        for other in self._users.values():
            if other.id == exclude_id:
                continue
            if other.username == user.username or other.email == user.email:
                raise DuplicateKeyError(
                    f"Duplicate key, Username: {user.username} or Email: {user.email} exists.",
                    details={"username": user.username, "email": user.email},
                )

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            u = self._users.get(user_id)
            return u.model_copy() if u is not None else None

    def get(self, user_id: str) -> User:
        u = self.find_by_id(user_id)
        if u is None:
            raise NotFoundError(f"User not found: {user_id}", details={"id": user_id})
        return u

    def find_by_username(self, username: str) -> Optional[User]:
        return self._find_one(lambda u: u.username == username)

    def find_by_email(self, email: str) -> Optional[User]:
        return self._find_one(lambda u: u.email == email)

    def _find_one(self, predicate: Callable[[User], bool]) -> Optional[User]:
        with self._lock:
            for u in self._users.values():
                if predicate(u):
                    return u.model_copy()
        return None

    def exists_by_id(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._users

    def exists_by_username(self, username: str) -> bool:
        return self.find_by_username(username) is not None

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def find_all(self) -> Iterator[User]:
        with self._lock:
            snapshot = [u.model_copy() for u in self._users.values()]
        yield from snapshot

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def delete(self, user: User) -> None:
        if user.id:
            self.delete_by_id(user.id)

    def delete_by_id(self, user_id: str) -> None:
        with self._lock:
            self._users.pop(user_id, None)

    def delete_all(self) -> None:
        with self._lock:
            self._users.clear()
