"""
AdminAction model.

Audit trail for privileged operations that bypass normal business rules.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import JSONType


class AdminAction(Base):
    """
    AdminAction entity.

    Attributes:
        id: Primary key
        admin_id: External admin identity (None for system/scripts)
        action_type: One of AdminActionType values
        target_user_id: Affected user, if any
        details: Action-specific payload (before/after values, ids)
        created_at: When the action was performed
    """

    __tablename__ = "admin_actions"
    __table_args__ = (
        Index("idx_admin_actions_target", "target_user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    admin_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    action_type: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )
    target_user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    details: Mapped[dict[str, Any]] = mapped_column(
        JSONType, default=dict, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<AdminAction(id={self.id}, type={self.action_type}, "
            f"target_user_id={self.target_user_id})>"
        )
