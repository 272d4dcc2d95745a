"""Permission catalog and effective-permission API schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expense_authz.domain.enums import FixedRole


class PermissionResponse(BaseModel):
    """One catalog entry."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    name: str
    description: str
    group: str
    requires: list[str] = Field(default_factory=list)

    @field_validator("requires", mode="before")
    @classmethod
    def _sorted(cls, v):
        return sorted(v or ())


class PermissionGroupResponse(BaseModel):
    """Permissions of one display group."""

    group: str
    permissions: list[PermissionResponse]


class PermissionTemplateResponse(BaseModel):
    """Built-in permission template."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    display_name: str
    description: str
    target_role: FixedRole
    permissions: list[str]

    @field_validator("permissions", mode="before")
    @classmethod
    def _sorted(cls, v):
        return sorted(v or ())


class MyPermissionsResponse(BaseModel):
    """Response for GET /me/permissions."""

    user_id: str
    company_id: str
    fixed_role: FixedRole
    is_all: bool = Field(..., description="True for super-admin (every permission, every company)")
    permissions: list[str]
    sources: dict[str, list[str]] | None = Field(
        default=None,
        description="Per-key grant sources (role:<fixed role> or custom_role:<id>) when explain=true",
    )
