"""ORM model for advertisements shown in the client apps."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from rawa.models.base import Base


class Ad(Base):
    """
    An ad is visible to the public only while in_show is set and expires_at is
    in the future. The daily sweep clears in_show once expires_at has passed.
    """

    __tablename__ = "ads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(191), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    in_show = Column(Boolean, nullable=False, default=False, index=True)
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
