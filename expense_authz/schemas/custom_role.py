"""Custom role API schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

CustomRoleSortField = Literal["name", "created_at", "updated_at"]
SortOrder = Literal["asc", "desc"]


class CustomRoleCreateRequest(BaseModel):
    """Request body for creating a custom role."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    permissions: list[str] = Field(default_factory=list, max_length=200)


class CustomRoleFromTemplateRequest(BaseModel):
    """Request body for creating a custom role from a built-in template."""

    template_name: str = Field(..., min_length=1, max_length=64)
    name: str | None = Field(default=None, min_length=1, max_length=100)


class CustomRoleUpdateRequest(BaseModel):
    """Request body for updating a custom role (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    permissions: list[str] | None = Field(default=None, max_length=200)


class CustomRoleResponse(BaseModel):
    """Custom role list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    company_id: str
    name: str
    description: str | None
    permissions: list[str]
    is_active: bool
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("permissions", mode="before")
    @classmethod
    def _sorted(cls, v):
        return sorted(v or ())


class CustomRoleDeactivatedResponse(BaseModel):
    """Response for DELETE /custom-roles/{id}."""

    role: CustomRoleResponse
    deactivated_assignments: int
