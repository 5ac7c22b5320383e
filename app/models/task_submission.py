"""
TaskSubmission model.

Immutable record of one user's claim of one product.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.types import MoneyType

if TYPE_CHECKING:
    from app.models.product import Product
    from app.models.referral_bonus import ReferralBonus
    from app.models.user import User


class TaskSubmission(Base):
    """
    TaskSubmission entity.

    The (user_id, product_id) unique constraint is what stops two
    concurrent submissions of the same product from both committing.

    Attributes:
        id: Primary key
        user_id: Submitting user
        product_id: Claimed product
        profit_earned: Profit credited to the submitter
        amount_debited: Effective negative amount charged
        created_at: Submission time
    """

    __tablename__ = "task_submissions"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "product_id", name="uq_task_submission_user_product"
        ),
        Index("idx_task_submissions_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    profit_earned: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )
    amount_debited: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="task_submissions"
    )
    product: Mapped["Product"] = relationship("Product")
    referral_bonuses: Mapped[list["ReferralBonus"]] = relationship(
        "ReferralBonus",
        back_populates="task_submission",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<TaskSubmission(id={self.id}, user_id={self.user_id}, "
            f"product_id={self.product_id}, profit={self.profit_earned}, "
            f"debited={self.amount_debited})>"
        )
