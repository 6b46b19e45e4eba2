"""Request/response schemas for currencies."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CurrencyCreateRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=191, description="ISO code, e.g. USD")
    symbol: str = Field(..., min_length=1, max_length=191)
    exchange_rate: Decimal = Field(..., gt=0, max_digits=12, decimal_places=6)


class CurrencyUpdateRequest(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=191)
    symbol: str | None = Field(default=None, min_length=1, max_length=191)
    exchange_rate: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=6)


class CurrencyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    symbol: str
    exchange_rate: Decimal


class CurrencyResponse(BaseModel):
    currency: CurrencyOut


class CurrenciesListResponse(BaseModel):
    currencies: list[CurrencyOut]
