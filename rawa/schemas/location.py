"""Request/response schemas for the location directory (countries, provinces, districts)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rawa.schemas.currency import CurrencyCreateRequest, CurrencyOut


class CountryCreateRequest(BaseModel):
    eng_name: str = Field(..., min_length=2, max_length=191)
    ar_name: str = Field(..., min_length=2, max_length=191)
    currency: CurrencyCreateRequest = Field(
        ..., description="Linked by code; created with this symbol and rate when the code is new"
    )


class CountryUpdateRequest(BaseModel):
    eng_name: str | None = Field(default=None, min_length=2, max_length=191)
    ar_name: str | None = Field(default=None, min_length=2, max_length=191)
    currency: CurrencyCreateRequest | None = None


class CountrySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    eng_name: str
    ar_name: str


class CountryOut(CountrySummary):
    currency: CurrencyOut | None = None
    created_at: datetime
    updated_at: datetime


class CountryResponse(BaseModel):
    country: CountryOut


class CountriesListResponse(BaseModel):
    countries: list[CountryOut]


class ProvinceCreateRequest(BaseModel):
    eng_name: str = Field(..., min_length=2, max_length=191)
    ar_name: str = Field(..., min_length=2, max_length=191)
    country_id: int


class ProvinceUpdateRequest(BaseModel):
    eng_name: str | None = Field(default=None, min_length=2, max_length=191)
    ar_name: str | None = Field(default=None, min_length=2, max_length=191)
    country_id: int | None = None


class ProvinceSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    eng_name: str
    ar_name: str
    country_id: int


class ProvinceOut(ProvinceSummary):
    country: CountrySummary
    created_at: datetime
    updated_at: datetime


class ProvinceResponse(BaseModel):
    province: ProvinceOut


class ProvincesListResponse(BaseModel):
    provinces: list[ProvinceOut]


class DistrictCreateRequest(BaseModel):
    eng_name: str = Field(..., min_length=2, max_length=191)
    ar_name: str = Field(..., min_length=2, max_length=191)
    province_id: int


class DistrictUpdateRequest(BaseModel):
    eng_name: str | None = Field(default=None, min_length=2, max_length=191)
    ar_name: str | None = Field(default=None, min_length=2, max_length=191)
    province_id: int | None = None


class DistrictOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    eng_name: str
    ar_name: str
    province_id: int
    province: ProvinceSummary
    created_at: datetime
    updated_at: datetime


class DistrictResponse(BaseModel):
    district: DistrictOut


class DistrictsListResponse(BaseModel):
    districts: list[DistrictOut]
