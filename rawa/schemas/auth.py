"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from rawa.schemas.user import UserOut, UserRole


class SignupRequest(BaseModel):
    """Self-registration. Without an email the account is usable immediately."""

    username: str = Field(..., min_length=3, max_length=191, description="Username")
    password: str = Field(..., min_length=6, max_length=128, description="Password")
    email: EmailStr | None = Field(default=None, description="Optional email; must be verified")
    phone: str | None = Field(default=None, max_length=64, description="Phone number")


class LoginRequest(BaseModel):
    """Credentials for login; identifier is a username or an email."""

    identifier: str = Field(..., min_length=3, max_length=191, description="Username or email")
    password: str = Field(..., min_length=6, max_length=128, description="Password")


class VerifyEmailRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., min_length=6, max_length=6, pattern=r"^[0-9]{6}$")


class EmailRequest(BaseModel):
    """Body for resend-code and forgot-password."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., min_length=6, max_length=6, pattern=r"^[0-9]{6}$")
    new_password: str = Field(..., min_length=6, max_length=128)


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(..., min_length=6, max_length=128)
    new_password: str = Field(..., min_length=6, max_length=128)


class AuthResponse(BaseModel):
    """
    Result of signup/login/verify-email.

    access_token is absent while needs_verification is True.
    """

    needs_verification: bool = Field(default=False)
    access_token: str | None = Field(default=None, description="JWT access token")
    token_type: str | None = Field(default=None, description="Token type")
    message: str | None = None
    user: UserOut | None = None


class MessageResponse(BaseModel):
    message: str


class CurrentUser(BaseModel):
    """Authenticated user (id, username, role) threaded into handlers as the request context."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: UserRole
