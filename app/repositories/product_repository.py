"""
Product repository.

Data access layer for Product model.
"""

from collections.abc import Collection
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.product import Product
from app.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    """Product repository with availability queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize product repository."""
        super().__init__(Product, session)

    async def find_active(self) -> list[Product]:
        """
        Get active products regardless of end date, newest first.

        Returns:
            List of active products
        """
        stmt = (
            select(Product)
            .where(Product.is_active.is_(True))
            .order_by(Product.created_at.desc(), Product.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_available(
        self,
        now: datetime,
        exclude_ids: Collection[int] = (),
    ) -> list[Product]:
        """
        Get claimable products (active and ending after now), newest first.

        Args:
            now: Reference instant
            exclude_ids: Product IDs to leave out

        Returns:
            List of claimable products
        """
        stmt = select(Product).where(
            Product.is_active.is_(True),
            Product.end_date > now,
        )
        if exclude_ids:
            stmt = stmt.where(Product.id.not_in(list(exclude_ids)))

        stmt = stmt.order_by(Product.created_at.desc(), Product.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
