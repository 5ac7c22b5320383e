"""
User model.

Represents a registered platform user.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.types import MoneyType

if TYPE_CHECKING:
    from app.models.deposit import Deposit
    from app.models.task_submission import TaskSubmission
    from app.models.user_task_override import UserTaskOverride
    from app.models.withdrawal import Withdrawal


class User(Base):
    """
    User model - platform accounts.

    Balance is allowed to go negative only through an admin override;
    task submissions never push it below zero.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            'completed_tasks >= 0',
            name='check_user_completed_tasks_non_negative'
        ),
        CheckConstraint(
            'level >= 1', name='check_user_level_positive'
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Identity
    username: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    phone: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )
    name: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    country: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )

    # Referral codes
    referral_code: Mapped[str] = mapped_column(
        String(20), unique=True, index=True, nullable=False
    )
    invite_code: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )

    # Wallet
    wallet_address: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    wallet_network: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )

    # Balances and progress
    balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    level: Mapped[int] = mapped_column(
        Integer, default=1, nullable=False
    )
    completed_tasks: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    # Referral
    referred_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Status
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    referred_by: Mapped[Optional["User"]] = relationship(
        "User",
        remote_side=[id],
        back_populates="referred_users",
        foreign_keys=[referred_by_id],
    )
    referred_users: Mapped[list["User"]] = relationship(
        "User",
        back_populates="referred_by",
        foreign_keys=[referred_by_id],
    )
    task_submissions: Mapped[list["TaskSubmission"]] = relationship(
        "TaskSubmission",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    task_overrides: Mapped[list["UserTaskOverride"]] = relationship(
        "UserTaskOverride",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    deposits: Mapped[list["Deposit"]] = relationship(
        "Deposit",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Deposit.created_at.desc()",
    )
    withdrawals: Mapped[list["Withdrawal"]] = relationship(
        "Withdrawal",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Withdrawal.created_at.desc()",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(id={self.id}, username={self.username!r}, "
            f"balance={self.balance}, level={self.level}, "
            f"completed_tasks={self.completed_tasks})>"
        )
