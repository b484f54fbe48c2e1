from __future__ import annotations

from fastapi import Depends

from app.settings import Settings, get_settings
from app.user_service import UserService
from app.user_store import InMemoryUserStore


def get_settings_dep() -> Settings:
    """FastAPI dependency for settings.

    Delegates to app.settings.get_settings (canonical constructor).
    """
    return get_settings()


# NOTE: the store is the authoritative copy of every record, so unlike settings
# it must live for the whole process. Tests swap it via dependency_overrides.
_store = InMemoryUserStore()


def get_user_store() -> InMemoryUserStore:
    return _store


def get_user_service(store: InMemoryUserStore = Depends(get_user_store)) -> UserService:
    return UserService(store)
