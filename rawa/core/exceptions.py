"""Domain errors raised by services; routers translate them into HTTP responses."""

from typing import Any

from fastapi import HTTPException, status


class RawaError(Exception):
    """Base class for expected, user-facing failures. Carries the HTTP status it maps to."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def detail(self) -> Any:
        return self.message


class InvalidInput(RawaError):
    """Raised when a value fails a domain-level shape check (e.g. empty password)."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Invalid input"


class Unauthenticated(RawaError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class Forbidden(RawaError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class Conflict(RawaError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class NotFound(RawaError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidCredentials(RawaError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid username, email or password"


class IncorrectPassword(RawaError):
    """Current password supplied with a password change does not match."""

    default_message = "Old password is incorrect"


class AccountDisabled(RawaError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Account disabled"


class NeedsVerification(RawaError):
    """Login refused until the email address is verified; a fresh code has been sent."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Email not verified. Verification code sent."

    def detail(self) -> Any:
        return {"message": self.message, "needs_verification": True}


class InvalidCode(RawaError):
    default_message = "Invalid code"


class CodeExpired(RawaError):
    default_message = "Code expired"


class DeliveryFailed(RawaError):
    """Mail transport failed. Nothing was persisted; the caller may retry the whole request."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Could not send email, please try again later"


def to_http_exception(exc: RawaError) -> HTTPException:
    """Map a domain error onto FastAPI's HTTPException (adds WWW-Authenticate on 401)."""
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(status_code=exc.status_code, detail=exc.detail(), headers=headers)
