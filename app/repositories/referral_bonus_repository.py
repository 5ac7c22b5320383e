"""
ReferralBonus repository.

Data access layer for ReferralBonus model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.referral_bonus import ReferralBonus
from app.repositories.base import BaseRepository


class ReferralBonusRepository(BaseRepository[ReferralBonus]):
    """ReferralBonus repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral bonus repository."""
        super().__init__(ReferralBonus, session)

    async def get_by_submission(
        self, task_submission_id: int
    ) -> list[ReferralBonus]:
        """
        Get bonuses paid out for one submission.

        Args:
            task_submission_id: TaskSubmission ID

        Returns:
            List of bonuses ordered by id
        """
        stmt = (
            select(ReferralBonus)
            .where(ReferralBonus.task_submission_id == task_submission_id)
            .order_by(ReferralBonus.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
