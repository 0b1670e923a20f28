from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel

from user_domain.api.dependencies import get_user_service
from user_domain.models.user import UNSET, User, UserPatch
from user_domain.services.users_service import (
    UserAlreadyExistsError,
    UserNotFoundError,
    UserService,
    UserServiceError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

Service = Annotated[UserService, Depends(get_user_service)]


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    active: bool

    @classmethod
    def from_user(cls, user: User) -> UserOut:
        return cls(
            id=user.id,  # type: ignore[arg-type]
            username=user.username,
            email=user.email,
            active=user.active,
        )


class UserCreateIn(BaseModel):
    username: str
    email: str


class UserUpdateIn(BaseModel):
    # Keys left out of the JSON body stay UNSET; an explicit null is sent
    # through to the service, which rejects it.
    username: str | None = None
    email: str | None = None

    def to_patch(self) -> UserPatch:
        sent = self.model_fields_set
        return UserPatch(
            username=self.username if "username" in sent else UNSET,
            email=self.email if "email" in sent else UNSET,
        )


def _http_error(e: UserServiceError) -> HTTPException:
    if isinstance(e, UserNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, UserAlreadyExistsError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    logger.warning("User request rejected status=%d: %s", code, e)
    return HTTPException(status_code=code, detail=str(e))


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def post_user(payload: UserCreateIn, service: Service) -> UserOut:
    try:
        user = service.create_user(
            User.new(username=payload.username, email=payload.email)
        )
    except UserServiceError as e:
        raise _http_error(e) from None
    return UserOut.from_user(user)


@router.get("", response_model=list[UserOut])
def get_users(
    service: Service,
    include_inactive: Annotated[bool, Query()] = False,
) -> list[UserOut]:
    users = service.list_users() if include_inactive else service.get_all_active_users()
    return [UserOut.from_user(u) for u in users]


@router.get("/by-username/{username}", response_model=UserOut)
def get_user_by_username(username: str, service: Service) -> UserOut:
    try:
        user = service.get_user_by_username(username)
    except UserServiceError as e:
        raise _http_error(e) from None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User not found with username: {username}",
        )
    return UserOut.from_user(user)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, service: Service) -> UserOut:
    try:
        user = service.get_user_by_id(user_id)
    except UserServiceError as e:
        raise _http_error(e) from None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User not found with id: {user_id}",
        )
    return UserOut.from_user(user)


@router.patch("/{user_id}", response_model=UserOut)
def patch_user(user_id: int, payload: UserUpdateIn, service: Service) -> UserOut:
    try:
        user = service.update_user(user_id, payload.to_patch())
    except UserServiceError as e:
        raise _http_error(e) from None
    return UserOut.from_user(user)


@router.post("/{user_id}/deactivate", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_user(user_id: int, service: Service) -> Response:
    try:
        service.deactivate_user(user_id)
    except UserServiceError as e:
        raise _http_error(e) from None
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, service: Service) -> Response:
    try:
        service.delete_user(user_id)
    except UserServiceError as e:
        raise _http_error(e) from None
    return Response(status_code=status.HTTP_204_NO_CONTENT)
