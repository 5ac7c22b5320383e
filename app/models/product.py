"""
Product model.

A claimable task definition with a price and a default debit.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import MoneyType


class Product(Base):
    """
    Product entity.

    Claimable only while is_active is set and end_date is in the future.

    Attributes:
        id: Primary key
        name: Display name
        image: Optional image path or URL
        price: Listed product price
        negative_amount: Default amount debited on submission
        end_date: Last moment the product can be claimed (exclusive)
        is_active: Admin on/off switch
        created_at: Creation time
    """

    __tablename__ = "products"
    __table_args__ = (
        Index("idx_products_active_end_date", "is_active", "end_date"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    price: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    negative_amount: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    end_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Product(id={self.id}, name={self.name!r}, "
            f"negative_amount={self.negative_amount}, active={self.is_active})>"
        )
