"""User management on behalf of an authenticated actor. All permission checks go through access_control."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rawa.core.database import commit_or_conflict
from rawa.core.exceptions import Conflict, DeliveryFailed, NotFound
from rawa.core.security import hash_password
from rawa.models import User
from rawa.schemas.auth import CurrentUser
from rawa.schemas.user import DEFAULT_ROLE, UserCreateRequest, UserUpdateRequest
from rawa.services.access_control import STAFF_ROLES, Decision, authorize
from rawa.services.mailer import Mailer
from rawa.services.verification_codes import issue_code

if TYPE_CHECKING:
    from rawa.core.config import Settings

logger = logging.getLogger(__name__)

_CONFLICT_MESSAGE = "Username or email already exists"


def _commit(db: Session) -> None:
    commit_or_conflict(db, _CONFLICT_MESSAGE)


def _get_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def _taken_by_other(db: Session, username: str | None, email: str | None, exclude_id: int | None) -> bool:
    clauses = []
    if username:
        clauses.append(User.username == username)
    if email:
        clauses.append(User.email == email)
    if not clauses:
        return False
    query = db.query(User.id).filter(or_(*clauses))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def create_user(db: Session, actor: CurrentUser, body: UserCreateRequest) -> User:
    """Create a user with the requested role; staff-created accounts are pre-verified."""
    requested_role = body.role or DEFAULT_ROLE
    authorize(actor, "create_user", requested_role=requested_role)

    if _taken_by_other(db, body.username, body.email, exclude_id=None):
        raise Conflict(_CONFLICT_MESSAGE)

    user = User(
        username=body.username,
        email=body.email,
        phone=body.phone,
        password_hash=hash_password(body.password),
        role=requested_role,
        email_verified=actor.role in STAFF_ROLES,
        status="ACTIVE",
    )
    db.add(user)
    _commit(db)
    db.refresh(user)
    logger.info(
        "User created",
        extra={"user_id": user.id, "role": user.role, "actor_id": actor.id},
    )
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.username).all()


def get_user(db: Session, actor: CurrentUser, user_id: int) -> tuple[User, Decision]:
    """Return the user and whether the actor sees the full or the restricted projection."""
    user = _get_or_404(db, user_id)
    decision = authorize(actor, "view_user", target_id=user.id, target_role=user.role)
    return user, decision


def update_user(
    db: Session,
    mailer: Mailer,
    actor: CurrentUser,
    user_id: int,
    body: UserUpdateRequest,
    settings: Settings,
) -> User:
    """
    Apply a partial update.

    role needs change_role rights, status needs change_status rights and
    password needs set_password rights. An email change by a non-staff actor
    resets verification and mails a code to the new address; that mail and the
    update commit together.
    """
    user = _get_or_404(db, user_id)
    authorize(actor, "edit_user", target_id=user.id, target_role=user.role)

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "role" in changes:
        authorize(
            actor,
            "change_role",
            target_id=user.id,
            target_role=user.role,
            requested_role=changes["role"],
        )
    if "password" in changes:
        authorize(actor, "set_password", target_id=user.id, target_role=user.role)
    if "status" in changes:
        authorize(actor, "change_status", target_id=user.id, target_role=user.role)

    if _taken_by_other(db, changes.get("username"), changes.get("email"), exclude_id=user.id):
        raise Conflict(_CONFLICT_MESSAGE)

    email_changed = "email" in changes and changes["email"] != user.email

    password = changes.pop("password", None)
    if password is not None:
        user.password_hash = hash_password(password)
    for field, value in changes.items():
        setattr(user, field, value)

    if email_changed and actor.role not in STAFF_ROLES:
        user.email_verified = False
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            raise Conflict(_CONFLICT_MESSAGE) from e
        try:
            issue_code(
                db,
                user,
                mailer,
                purpose="verify_email",
                ttl_minutes=settings.VERIFICATION_CODE_TTL_MINUTES,
            )
        except DeliveryFailed:
            db.rollback()
            raise

    _commit(db)
    db.refresh(user)
    logger.info(
        "User updated",
        extra={"user_id": user.id, "actor_id": actor.id, "fields": sorted(body.model_fields_set)},
    )
    return user


def delete_user(db: Session, actor: CurrentUser, user_id: int) -> None:
    """Delete the user; their verification codes go with them."""
    user = _get_or_404(db, user_id)
    authorize(actor, "delete_user", target_id=user.id, target_role=user.role)
    db.delete(user)
    db.commit()
    logger.info("User deleted", extra={"user_id": user_id, "actor_id": actor.id})
