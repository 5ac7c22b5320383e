"""
Withdrawal repository.

Data access layer for Withdrawal model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import RequestStatus
from app.models.withdrawal import Withdrawal
from app.repositories.base import BaseRepository


class WithdrawalRepository(BaseRepository[Withdrawal]):
    """Withdrawal repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize withdrawal repository."""
        super().__init__(Withdrawal, session)

    async def get_user_withdrawals(self, user_id: int) -> list[Withdrawal]:
        """Get all withdrawals of a user, newest first."""
        stmt = (
            select(Withdrawal)
            .where(Withdrawal.user_id == user_id)
            .order_by(Withdrawal.created_at.desc(), Withdrawal.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_pending_total(self) -> Decimal:
        """
        Get sum of all pending withdrawal amounts.

        Returns:
            Pending payout total (0 if none)
        """
        stmt = select(
            func.coalesce(func.sum(Withdrawal.amount), 0)
        ).where(Withdrawal.status == RequestStatus.PENDING.value)
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))
