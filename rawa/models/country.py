"""ORM models for the location directory: country -> province -> district."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from rawa.models.base import Base


class Country(Base):
    """
    A country with English and Arabic names (each unique) and the currency
    prices are shown in. Deleting the currency leaves the country without one.
    """

    __tablename__ = "countries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    eng_name = Column(String(191), nullable=False, unique=True, index=True)
    ar_name = Column(String(191), nullable=False, unique=True, index=True)
    currency_id = Column(
        Integer,
        ForeignKey("currencies.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    currency = relationship("Currency")


class Province(Base):
    """Names are unique within a country. A country with provinces cannot be deleted."""

    __tablename__ = "provinces"
    __table_args__ = (
        UniqueConstraint("country_id", "eng_name", name="uq_provinces_country_eng_name"),
        UniqueConstraint("country_id", "ar_name", name="uq_provinces_country_ar_name"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    eng_name = Column(String(191), nullable=False, index=True)
    ar_name = Column(String(191), nullable=False, index=True)
    country_id = Column(
        Integer,
        ForeignKey("countries.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    country = relationship("Country")


class District(Base):
    """Names are unique within a province. A province with districts cannot be deleted."""

    __tablename__ = "districts"
    __table_args__ = (
        UniqueConstraint("province_id", "eng_name", name="uq_districts_province_eng_name"),
        UniqueConstraint("province_id", "ar_name", name="uq_districts_province_ar_name"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    eng_name = Column(String(191), nullable=False)
    ar_name = Column(String(191), nullable=False)
    province_id = Column(
        Integer,
        ForeignKey("provinces.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    province = relationship("Province")
