"""Auth endpoints (signup, login, verification, password reset/change) and auth dependencies."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from rawa.core.config import get_settings
from rawa.core.database import get_db
from rawa.core.exceptions import RawaError, to_http_exception
from rawa.core.security import verify_access_token
from rawa.models.user import User
from rawa.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    CurrentUser,
    EmailRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
    VerifyEmailRequest,
)
from rawa.schemas.user import UserOut, UserResponse
from rawa.services import auth_flow
from rawa.services.access_control import check_route_access
from rawa.services.mailer import Mailer, get_mailer

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _auth_response(result: auth_flow.AuthResult) -> AuthResponse:
    return AuthResponse(
        needs_verification=result.needs_verification,
        access_token=result.access_token,
        token_type="bearer" if result.access_token else None,
        message=result.message,
        user=UserOut.model_validate(result.user),
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    claims = verify_access_token(credentials.credentials)
    if claims is None:
        raise _unauthorized("Invalid or expired token")
    user = db.get(User, claims.user_id)
    if user is None or user.status != "ACTIVE":
        raise _unauthorized("User not found or inactive")
    return CurrentUser(id=user.id, username=user.username, role=user.role)


def require_roles(*roles: str) -> Callable[..., CurrentUser]:
    """Build a dependency that lets only the given roles through (403 otherwise)."""
    allowed = frozenset(roles)

    def _guard(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        try:
            return check_route_access(current_user, allowed)
        except RawaError as e:
            raise to_http_exception(e) from e

    return _guard


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> AuthResponse:
    """
    Register a new USER account.

    With an email a verification code is mailed and no token is returned
    (needs_verification=true). Without an email a token is returned at once.
    """
    try:
        result = auth_flow.signup(db, mailer, body, get_settings())
    except RawaError as e:
        raise to_http_exception(e) from e
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> AuthResponse:
    """
    Authenticate with username or email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        result = auth_flow.login(db, mailer, body.identifier, body.password, get_settings())
    except RawaError as e:
        raise to_http_exception(e) from e
    return _auth_response(result)


@router.post("/verify-email", response_model=AuthResponse)
def verify_email(
    body: VerifyEmailRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Verify an email address with a mailed code; returns a JWT access token."""
    try:
        result = auth_flow.verify_email(db, body.email, body.code)
    except RawaError as e:
        raise to_http_exception(e) from e
    return _auth_response(result)


@router.post("/resend-code", response_model=MessageResponse)
def resend_code(
    body: EmailRequest,
    db: Annotated[Session, Depends(get_db)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> MessageResponse:
    """Mail another verification code. Previously sent codes stay valid until they expire."""
    try:
        auth_flow.resend_code(db, mailer, body.email, get_settings())
    except RawaError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Verification code sent")


@router.post("/user/forgot-password", response_model=MessageResponse)
def forgot_password(
    body: EmailRequest,
    db: Annotated[Session, Depends(get_db)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> MessageResponse:
    """Mail a password reset code."""
    try:
        auth_flow.forgot_password(db, mailer, body.email, get_settings())
    except RawaError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Verification code sent")


@router.post("/user/reset-password", response_model=MessageResponse)
def reset_password(
    body: ResetPasswordRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Set a new password using a mailed reset code."""
    try:
        auth_flow.reset_password(db, body.email, body.code, body.new_password)
    except RawaError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Password reset successfully")


@router.post("/user/change-password/{user_id}", response_model=MessageResponse)
def change_password(
    user_id: int,
    body: ChangePasswordRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Change a password. The current password is required even for administrators."""
    try:
        auth_flow.change_password(db, current_user, user_id, body.old_password, body.new_password)
    except RawaError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Password changed successfully")


@router.get("/me", response_model=UserResponse)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Return the authenticated user's own profile."""
    user = db.get(User, current_user.id)
    return UserResponse(user=UserOut.model_validate(user))
