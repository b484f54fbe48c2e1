from __future__ import annotations

import logging
from typing import List, Optional

from app.models import User
from app.user_store import InMemoryUserStore

logger = logging.getLogger("user_record_store.service")


class UserService:
    """Facade the HTTP layer talks to.

    Store errors propagate unchanged; retry policy belongs to the caller.
    """

    def __init__(self, store: InMemoryUserStore):
        self._store = store

    def save_user(self, user: User) -> User:
        saved = self._store.save(user)
        logger.info("Saved user id=%s version=%s", saved.id, saved.version)
        return saved

    def get_user(self, user_id: str) -> User:
        """Like get_user_by_id, but raises NotFoundError when absent."""
        return self._store.get(user_id)

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self._store.find_by_id(user_id)

    def get_all_users(self) -> List[User]:
        return list(self._store.find_all())

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._store.find_by_email(email)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._store.find_by_username(username)

    def user_exists_by_id(self, user_id: str) -> bool:
        return self._store.exists_by_id(user_id)

    def user_exists_by_email(self, email: str) -> bool:
        return self._store.exists_by_email(email)

    def user_exists_by_username(self, username: str) -> bool:
        return self._store.exists_by_username(username)

    def delete_user_by_id(self, user_id: str) -> None:
        self._store.delete_by_id(user_id)
        logger.info("Deleted user id=%s", user_id)

    def delete_user(self, user: User) -> None:
        self._store.delete(user)
        logger.info("Deleted user id=%s", user.id)

    def delete_all_users(self) -> None:
        self._store.delete_all()
        logger.info("Deleted all users")

    def user_count(self) -> int:
        return self._store.count()
