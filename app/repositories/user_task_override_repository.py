"""
UserTaskOverride repository.

Data access layer for per-user debit overrides.
"""

from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user_task_override import UserTaskOverride
from app.repositories.base import BaseRepository


class UserTaskOverrideRepository(BaseRepository[UserTaskOverride]):
    """UserTaskOverride repository with upsert semantics."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize override repository."""
        super().__init__(UserTaskOverride, session)

    async def find_override(
        self, user_id: int, product_id: int
    ) -> UserTaskOverride | None:
        """
        Get the override for a (user, product) pair.

        Args:
            user_id: User ID
            product_id: Product ID

        Returns:
            Override or None
        """
        return await self.get_by(user_id=user_id, product_id=product_id)

    async def get_amounts_for_user(self, user_id: int) -> dict[int, Decimal]:
        """
        Get all override amounts for a user keyed by product ID.

        Args:
            user_id: User ID

        Returns:
            Mapping product_id -> negative_amount
        """
        stmt = select(
            UserTaskOverride.product_id, UserTaskOverride.negative_amount
        ).where(UserTaskOverride.user_id == user_id)
        result = await self.session.execute(stmt)
        return {product_id: amount for product_id, amount in result.all()}

    async def upsert(
        self, user_id: int, product_id: int, negative_amount: Decimal
    ) -> UserTaskOverride:
        """
        Create or update the override for a (user, product) pair.

        Args:
            user_id: User ID
            product_id: Product ID
            negative_amount: Debit to apply instead of the product default

        Returns:
            Created or updated override
        """
        existing = await self.find_override(user_id, product_id)
        if existing:
            existing.negative_amount = negative_amount
            await self.session.flush()
            return existing

        return await self.create(
            user_id=user_id,
            product_id=product_id,
            negative_amount=negative_amount,
        )

    async def replace_for_products(
        self,
        user_id: int,
        product_ids: Iterable[int],
        negative_amount: Decimal,
    ) -> list[UserTaskOverride]:
        """
        Replace overrides for a set of products with one amount.

        Args:
            user_id: User ID
            product_ids: Product IDs to override
            negative_amount: Debit applied to every listed product

        Returns:
            Newly created overrides
        """
        ids = list(dict.fromkeys(product_ids))
        if not ids:
            return []

        await self.session.execute(
            delete(UserTaskOverride).where(
                UserTaskOverride.user_id == user_id,
                UserTaskOverride.product_id.in_(ids),
            )
        )

        overrides = [
            UserTaskOverride(
                user_id=user_id,
                product_id=product_id,
                negative_amount=negative_amount,
            )
            for product_id in ids
        ]
        self.session.add_all(overrides)
        await self.session.flush()
        return overrides
