"""Request/response schemas for ads."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AdCreateRequest(BaseModel):
    title: str | None = Field(default=None, max_length=191)
    expires_at: datetime | None = Field(
        default=None,
        description="Defaults to now + AD_DEFAULT_TTL_DAYS.",
    )


class AdUpdateRequest(BaseModel):
    title: str | None = Field(default=None, max_length=191)
    expires_at: datetime | None = None
    in_show: bool | None = None


class AdOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str | None = None
    expires_at: datetime
    in_show: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AdResponse(BaseModel):
    ad: AdOut


class AdsListResponse(BaseModel):
    ads: list[AdOut]
