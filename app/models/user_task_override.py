"""
UserTaskOverride model.

Per-user, per-product replacement of a product's default debit.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.types import MoneyType

if TYPE_CHECKING:
    from app.models.product import Product
    from app.models.user import User


class UserTaskOverride(Base):
    """UserTaskOverride entity - at most one row per (user, product)."""

    __tablename__ = "user_task_overrides"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "product_id", name="uq_user_task_override_user_product"
        ),
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
    negative_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )
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

    user: Mapped["User"] = relationship(
        "User", back_populates="task_overrides"
    )
    product: Mapped["Product"] = relationship("Product")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<UserTaskOverride(user_id={self.user_id}, "
            f"product_id={self.product_id}, "
            f"negative_amount={self.negative_amount})>"
        )
