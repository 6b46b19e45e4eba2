"""User management endpoints. Permission rules live in services.access_control."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from rawa.api.v1.auth import get_current_user, require_roles
from rawa.core.config import get_settings
from rawa.core.database import get_db
from rawa.core.exceptions import RawaError, to_http_exception
from rawa.schemas.auth import CurrentUser, MessageResponse
from rawa.schemas.user import (
    UserCreateRequest,
    UserOut,
    UserPublic,
    UserResponse,
    UsersListResponse,
    UserUpdateRequest,
)
from rawa.services import users as user_service
from rawa.services.access_control import STAFF_ROLES
from rawa.services.mailer import Mailer, get_mailer

router = APIRouter()

require_staff = require_roles(*STAFF_ROLES)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(require_staff)],
) -> UserResponse:
    """
    Create a user. SUPER_ADMIN may create any role, ADMIN any role but
    SUPER_ADMIN, DATA_ENTRY only ADMIN, DATA_ENTRY or USER.
    """
    try:
        user = user_service.create_user(db, current_user, body)
    except RawaError as e:
        raise to_http_exception(e) from e
    return UserResponse(user=UserOut.model_validate(user))


@router.get("", response_model=UsersListResponse)
def list_users(
    db: Annotated[Session, Depends(get_db)],
    _staff: Annotated[CurrentUser, Depends(require_staff)],
) -> UsersListResponse:
    """List all users ordered by username (staff only)."""
    users = user_service.list_users(db)
    return UsersListResponse(users=[UserOut.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=UserResponse | UserPublic)
def get_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserResponse | UserPublic:
    """Full profile for self and privileged roles; id, username and phone for everyone else."""
    try:
        user, decision = user_service.get_user(db, current_user, user_id)
    except RawaError as e:
        raise to_http_exception(e) from e
    if decision == "restricted":
        return UserPublic.model_validate(user)
    return UserResponse(user=UserOut.model_validate(user))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserResponse:
    """Update a user. Changing role or password needs SUPER_ADMIN or ADMIN."""
    try:
        user = user_service.update_user(db, mailer, current_user, user_id, body, get_settings())
    except RawaError as e:
        raise to_http_exception(e) from e
    return UserResponse(user=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    try:
        user_service.delete_user(db, current_user, user_id)
    except RawaError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="User deleted successfully")
