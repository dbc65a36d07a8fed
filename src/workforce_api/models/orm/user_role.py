"""User-Role assignment ORM model."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_api.models.orm.base import Base, UUIDMixin, utcnow


class UserRoleORM(Base, UUIDMixin):
    """A role held by a user, optionally bound to one worksite."""

    __tablename__ = "user_roles"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    worksite_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("worksites.id", ondelete="CASCADE"), nullable=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    user: Mapped["UserORM"] = relationship("UserORM", back_populates="role_assignments")
    role: Mapped["RoleORM"] = relationship("RoleORM", back_populates="assignments")

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", "worksite_id", name="uq_user_roles_scope"),
    )
