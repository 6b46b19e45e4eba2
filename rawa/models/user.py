"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from rawa.models.base import Base


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: one of SUPER_ADMIN, ADMIN, DATA_ENTRY, FACTORY_OWNER, EMPLOYEE, USER
    status: ACTIVE, INACTIVE or SUSPENDED
    email_verified is True from the start for accounts created without an email.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(191), nullable=False, unique=True, index=True)
    email = Column(String(191), nullable=True, unique=True)
    phone = Column(String(64), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="USER", index=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    status = Column(String(16), nullable=False, default="ACTIVE")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    verification_codes = relationship(
        "VerificationCode",
        back_populates="user",
        cascade="all, delete-orphan",
    )
