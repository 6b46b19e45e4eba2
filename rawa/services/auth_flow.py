"""Auth flows: signup, login, email verification, password reset and change.

Each flow commits at most once. Code consumption and the user change it
unlocks are committed together; a mail failure rolls the whole flow back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rawa.core.database import commit_or_conflict
from rawa.core.exceptions import (
    AccountDisabled,
    CodeExpired,
    Conflict,
    DeliveryFailed,
    IncorrectPassword,
    InvalidCode,
    InvalidCredentials,
    NeedsVerification,
    NotFound,
)
from rawa.core.security import create_access_token, hash_password, verify_password
from rawa.models import User
from rawa.schemas.auth import CurrentUser, SignupRequest
from rawa.schemas.user import DEFAULT_ROLE
from rawa.services.access_control import authorize
from rawa.services.mailer import CodePurpose, Mailer
from rawa.services.verification_codes import consume_code, issue_code

if TYPE_CHECKING:
    from rawa.core.config import Settings

logger = logging.getLogger(__name__)

_CONFLICT_MESSAGE = "Username or email already exists"


@dataclass
class AuthResult:
    """Outcome of a flow that may hand out a token."""

    user: User
    access_token: str | None = None
    needs_verification: bool = False
    message: str | None = None


def _issue_token(user: User) -> str:
    return create_access_token(user.id, user.username)


def _get_user_by_email(db: Session, email: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise NotFound("User not found")
    return user


def _commit(db: Session, conflict_message: str = _CONFLICT_MESSAGE) -> None:
    try:
        commit_or_conflict(db, conflict_message)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database commit failed")
        raise


def _send_code_and_commit(
    db: Session,
    user: User,
    mailer: Mailer,
    settings: Settings,
    purpose: CodePurpose,
) -> None:
    try:
        issue_code(
            db,
            user,
            mailer,
            purpose=purpose,
            ttl_minutes=settings.VERIFICATION_CODE_TTL_MINUTES,
        )
    except DeliveryFailed:
        db.rollback()
        raise
    _commit(db)


def _signup_conflict(db: Session, username: str, email: str | None) -> str | None:
    """Friendly pre-check; the unique constraints still decide at flush time."""
    if db.query(User.id).filter(User.username == username).first() is not None:
        return "Username already exists"
    if email and db.query(User.id).filter(User.email == email).first() is not None:
        return "Email already exists"
    return None


def _find_login_user(db: Session, identifier: str) -> User | None:
    # An exact username match wins over another account whose email equals the identifier.
    user = db.query(User).filter(User.username == identifier).first()
    if user is None:
        user = db.query(User).filter(User.email == identifier).first()
    return user


def signup(db: Session, mailer: Mailer, body: SignupRequest, settings: Settings) -> AuthResult:
    """
    Register a USER account.

    With an email: user and first code are committed only if the mail went out,
    and no token is returned until the address is verified. Without an email:
    the account is verified from the start and a token is returned.
    """
    conflict = _signup_conflict(db, body.username, body.email)
    if conflict is not None:
        raise Conflict(conflict)

    user = User(
        username=body.username,
        email=body.email,
        phone=body.phone,
        password_hash=hash_password(body.password),
        role=DEFAULT_ROLE,
        email_verified=body.email is None,
        status="ACTIVE",
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise Conflict(_CONFLICT_MESSAGE) from e

    if user.email:
        _send_code_and_commit(db, user, mailer, settings, "verify_email")
        logger.info("User signed up, awaiting verification", extra={"user_id": user.id})
        return AuthResult(user=user, needs_verification=True, message="Verification code sent")

    _commit(db)
    logger.info("User signed up", extra={"user_id": user.id})
    return AuthResult(user=user, access_token=_issue_token(user))


def login(db: Session, mailer: Mailer, identifier: str, password: str, settings: Settings) -> AuthResult:
    """
    Authenticate by username or email.

    Username matches are tried before email matches. Same InvalidCredentials
    for an unknown identifier and a wrong password.
    An unverified email gets a fresh code and NeedsVerification instead of a token.
    """
    user = _find_login_user(db, identifier)
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    if user.status != "ACTIVE":
        raise AccountDisabled()

    if user.email and not user.email_verified:
        _send_code_and_commit(db, user, mailer, settings, "verify_email")
        raise NeedsVerification()

    return AuthResult(user=user, access_token=_issue_token(user))


def verify_email(db: Session, email: str, code: str) -> AuthResult:
    """Consume code and mark the email verified in one commit; returns a token."""
    user = _get_user_by_email(db, email)
    result = consume_code(db, user.id, code)
    if result == "not_found":
        raise InvalidCode()
    if result == "expired":
        raise CodeExpired()

    user.email_verified = True
    _commit(db)
    logger.info("Email verified", extra={"user_id": user.id})
    return AuthResult(user=user, access_token=_issue_token(user), message="Email verified")


def resend_code(db: Session, mailer: Mailer, email: str, settings: Settings) -> None:
    """Mail another verification code. Earlier codes are not invalidated."""
    user = _get_user_by_email(db, email)
    _send_code_and_commit(db, user, mailer, settings, "verify_email")


def forgot_password(db: Session, mailer: Mailer, email: str, settings: Settings) -> None:
    """Mail a password reset code. Unauthenticated entry point."""
    user = _get_user_by_email(db, email)
    _send_code_and_commit(db, user, mailer, settings, "reset_password")


def reset_password(db: Session, email: str, code: str, new_password: str) -> None:
    """Consume code and replace the password hash in one commit."""
    user = _get_user_by_email(db, email)
    result = consume_code(db, user.id, code)
    if result == "not_found":
        raise InvalidCode()
    if result == "expired":
        raise CodeExpired()

    user.password_hash = hash_password(new_password)
    _commit(db)
    logger.info("Password reset", extra={"user_id": user.id})


def change_password(
    db: Session,
    actor: CurrentUser,
    user_id: int,
    old_password: str,
    new_password: str,
) -> None:
    """
    Change user_id's password on behalf of actor.

    Role rules come first; then old_password must match the stored hash, for
    privileged actors as well.
    """
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    authorize(actor, "change_password", target_id=user.id, target_role=user.role)

    if not verify_password(old_password, user.password_hash):
        raise IncorrectPassword()

    user.password_hash = hash_password(new_password)
    _commit(db)
    logger.info("Password changed", extra={"user_id": user.id, "actor_id": actor.id})
