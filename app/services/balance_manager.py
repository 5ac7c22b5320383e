"""
Balance manager.

Single write path for User.balance. Every caller (task submissions,
referral bonuses, deposit approval, withdrawals) goes through
adjust_balance so concurrent updates serialize on the user row lock.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.user_repository import UserRepository
from app.utils.exceptions import USER_NOT_FOUND, NotFoundError


class BalanceManager:
    """Applies balance deltas under a row lock, inside the caller's transaction."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize balance manager.

        Args:
            session: Database session
        """
        self.session = session
        self.user_repo = UserRepository(session)

    async def adjust_balance(
        self, user_id: int, delta: Decimal, *, reason: str
    ) -> Decimal:
        """
        Add delta to a user's balance.

        Does not commit. Does not check the resulting sign; callers
        validate before adjusting.

        Args:
            user_id: User ID
            delta: Signed amount to add
            reason: Short tag for the log record

        Returns:
            New balance

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.user_repo.get_for_update(user_id)
        if not user:
            logger.error(
                "User not found for balance adjustment",
                extra={"user_id": user_id, "reason": reason},
            )
            raise NotFoundError(USER_NOT_FOUND, {"user_id": user_id})

        balance_before = user.balance
        user.balance = balance_before + delta
        await self.session.flush()

        logger.info(
            "Balance adjusted",
            extra={
                "user_id": user_id,
                "reason": reason,
                "delta": str(delta),
                "balance_before": str(balance_before),
                "balance_after": str(user.balance),
            },
        )
        return user.balance
