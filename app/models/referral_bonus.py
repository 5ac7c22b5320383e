"""
ReferralBonus model.

Credit paid to a referred user when their referrer completes a task.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.types import MoneyType

if TYPE_CHECKING:
    from app.models.task_submission import TaskSubmission
    from app.models.user import User


class ReferralBonus(Base):
    """ReferralBonus entity - one row per referred user per submission."""

    __tablename__ = "referral_bonuses"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    # The task completer
    referrer_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # The user receiving the bonus
    referred_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    task_submission_id: Mapped[int] = mapped_column(
        ForeignKey("task_submissions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    bonus_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    referrer: Mapped["User"] = relationship(
        "User", foreign_keys=[referrer_id]
    )
    referred_user: Mapped["User"] = relationship(
        "User", foreign_keys=[referred_user_id]
    )
    task_submission: Mapped["TaskSubmission"] = relationship(
        "TaskSubmission", back_populates="referral_bonuses"
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralBonus(id={self.id}, referrer_id={self.referrer_id}, "
            f"referred_user_id={self.referred_user_id}, "
            f"amount={self.bonus_amount})>"
        )
