"""RoleAssignment ORM model. Table: role_assignment."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from expense_authz.infrastructure.persistence.database import Base
from expense_authz.infrastructure.persistence.models.mixins import CompanyMixin, CuidMixin


class RoleAssignmentModel(CuidMixin, CompanyMixin, Base):
    """User to custom-role assignment. Rows are deactivated, never deleted.

    At most one active row per (user_id, custom_role_id, company_id), enforced
    by a partial unique index so that concurrent grants cannot both succeed.
    """

    __tablename__ = "role_assignment"

    user_id: Mapped[str] = mapped_column(String, nullable=False)
    custom_role_id: Mapped[str] = mapped_column(
        String, ForeignKey("custom_role.id", ondelete="RESTRICT"), nullable=False
    )
    assigned_by: Mapped[str | None] = mapped_column(String, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deactivated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    deactivated_by: Mapped[str | None] = mapped_column(String, nullable=True)
    deactivation_reason: Mapped[str | None] = mapped_column(String(32), nullable=True)

    __table_args__ = (
        Index(
            "uq_role_assignment_active_triple",
            "user_id",
            "custom_role_id",
            "company_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
        Index("ix_role_assignment_lookup", "company_id", "user_id"),
        Index("ix_role_assignment_role", "custom_role_id"),
    )
