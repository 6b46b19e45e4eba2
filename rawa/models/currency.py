"""ORM model for currencies and their exchange rates."""

from sqlalchemy import Column, Integer, Numeric, String

from rawa.models.base import Base


class Currency(Base):
    __tablename__ = "currencies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(191), nullable=False, unique=True)
    symbol = Column(String(191), nullable=False)
    exchange_rate = Column(Numeric(12, 6), nullable=False)
