"""SQLAlchemy ORM models."""

from rawa.models.ad import Ad
from rawa.models.base import Base
from rawa.models.country import Country, District, Province
from rawa.models.currency import Currency
from rawa.models.role import Role
from rawa.models.user import User
from rawa.models.verification_code import VerificationCode

__all__ = [
    "Ad",
    "Base",
    "Country",
    "Currency",
    "District",
    "Province",
    "Role",
    "User",
    "VerificationCode",
]
