from __future__ import annotations

from typing import List

from fastapi import APIRouter, Body, Depends, Response, status

from app.deps import get_user_service
from app.errors import NotFoundError
from app.models import CountResponse, ErrorResponse, User, UserIn
from app.user_service import UserService

# Store errors (ValidationError, DuplicateKeyError, OptimisticLockError,
# NotFoundError) propagate out of these handlers and are turned into JSON
# responses by the exception handler registered in app.main.
router = APIRouter(
    prefix="/user",
    tags=["users"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)


def _found(user: User | None, key: str) -> User:
    if user is None:
        raise NotFoundError(f"User not found: {key}", details={"key": key})
    return user


@router.get("", response_model=List[User])
def get_all_users(service: UserService = Depends(get_user_service)) -> List[User]:
    return service.get_all_users()


@router.get("/count", response_model=CountResponse)
def get_user_count(service: UserService = Depends(get_user_service)) -> CountResponse:
    return CountResponse(count=service.user_count())


@router.get("/by-username/{username}", response_model=User)
def get_user_by_username(username: str, service: UserService = Depends(get_user_service)) -> User:
    return _found(service.get_user_by_username(username), username)


@router.get("/by-email/{email}", response_model=User)
def get_user_by_email(email: str, service: UserService = Depends(get_user_service)) -> User:
    return _found(service.get_user_by_email(email), email)


@router.get("/{user_id}", response_model=User)
def get_user_by_id(user_id: str, service: UserService = Depends(get_user_service)) -> User:
    return service.get_user(user_id)


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserIn = Body(...), service: UserService = Depends(get_user_service)) -> User:
    return service.save_user(payload.to_user())


@router.put("/{user_id}", response_model=User)
def update_user(
    user_id: str,
    payload: UserIn = Body(...),
    service: UserService = Depends(get_user_service),
) -> User:
    user = payload.to_user()
    if not user.id:
        user.id = user_id
    return service.save_user(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user_by_id(user_id: str, service: UserService = Depends(get_user_service)) -> Response:
    service.delete_user_by_id(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_all_users(service: UserService = Depends(get_user_service)) -> Response:
    service.delete_all_users()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
