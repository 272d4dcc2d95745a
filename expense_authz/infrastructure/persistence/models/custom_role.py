"""CustomRole ORM model. Table: custom_role."""

from sqlalchemy import JSON, Boolean, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from expense_authz.infrastructure.persistence.database import Base
from expense_authz.infrastructure.persistence.models.mixins import MultiTenantModel


class CustomRoleModel(MultiTenantModel, Base):
    """Tenant-defined role; permissions stored as a JSON list of catalog keys.

    Active role names are unique per company (partial unique index).
    """

    __tablename__ = "custom_role"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    permissions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        Index(
            "uq_custom_role_company_name_active",
            "company_id",
            "name",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )
