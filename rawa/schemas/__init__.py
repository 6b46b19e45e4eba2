"""Pydantic request/response schemas."""

from rawa.schemas.ad import AdCreateRequest, AdOut, AdUpdateRequest
from rawa.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    CurrentUser,
    EmailRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    VerifyEmailRequest,
)
from rawa.schemas.currency import CurrencyCreateRequest, CurrencyOut, CurrencyUpdateRequest
from rawa.schemas.health import HealthResponse
from rawa.schemas.location import (
    CountryCreateRequest,
    CountryOut,
    CountryUpdateRequest,
    DistrictCreateRequest,
    DistrictOut,
    DistrictUpdateRequest,
    ProvinceCreateRequest,
    ProvinceOut,
    ProvinceUpdateRequest,
)
from rawa.schemas.role import RoleCreateRequest, RoleOut, RoleUpdateRequest
from rawa.schemas.user import (
    USER_ROLES,
    UserCreateRequest,
    UserOut,
    UserPublic,
    UserRole,
    UserStatus,
    UserUpdateRequest,
)

__all__ = [
    "AdCreateRequest",
    "AdOut",
    "AdUpdateRequest",
    "AuthResponse",
    "ChangePasswordRequest",
    "CountryCreateRequest",
    "CountryOut",
    "CountryUpdateRequest",
    "CurrencyCreateRequest",
    "CurrencyOut",
    "CurrencyUpdateRequest",
    "CurrentUser",
    "DistrictCreateRequest",
    "DistrictOut",
    "DistrictUpdateRequest",
    "EmailRequest",
    "HealthResponse",
    "LoginRequest",
    "ProvinceCreateRequest",
    "ProvinceOut",
    "ProvinceUpdateRequest",
    "ResetPasswordRequest",
    "RoleCreateRequest",
    "RoleOut",
    "RoleUpdateRequest",
    "SignupRequest",
    "USER_ROLES",
    "UserCreateRequest",
    "UserOut",
    "UserPublic",
    "UserRole",
    "UserStatus",
    "UserUpdateRequest",
    "VerifyEmailRequest",
]
