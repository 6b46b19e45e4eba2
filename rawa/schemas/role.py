"""Request/response schemas for the role catalogue."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RoleCreateRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=191)


class RoleUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=191)


class RoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleResponse(BaseModel):
    role: RoleOut


class RolesListResponse(BaseModel):
    roles: list[RoleOut]
