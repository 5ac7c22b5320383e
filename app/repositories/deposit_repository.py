"""
Deposit repository.

Data access layer for Deposit model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.deposit import Deposit
from app.repositories.base import BaseRepository


class DepositRepository(BaseRepository[Deposit]):
    """Deposit repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize deposit repository."""
        super().__init__(Deposit, session)

    async def get_user_deposits(self, user_id: int) -> list[Deposit]:
        """
        Get all deposits of a user, newest first.

        Args:
            user_id: User ID

        Returns:
            List of deposits
        """
        stmt = (
            select(Deposit)
            .where(Deposit.user_id == user_id)
            .order_by(Deposit.created_at.desc(), Deposit.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
