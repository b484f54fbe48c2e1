from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    id: Optional[str] = Field(default=None, description="Assigned by the store on create")
    version: int = Field(default=0, ge=0, description="Optimistic-lock token")
    # Emptiness is checked by the store's validation step, not here, so a blank
    # value surfaces as a store ValidationError rather than a schema error.
    username: Optional[str] = None
    email: Optional[str] = None
    name: str = ""


class UserIn(BaseModel):
    """Request body for POST /user and PUT /user/{id}."""

    id: Optional[str] = None
    version: int = Field(default=0, ge=0)
    username: Optional[str] = None
    email: Optional[str] = None
    name: str = ""

    def to_user(self) -> User:
        return User(**self.model_dump())


class CountResponse(BaseModel):
    count: int = Field(ge=0)


class ErrorResponse(BaseModel):
    error: str
    detail: str
