"""
TaskSubmission repository.

Data access layer for TaskSubmission model.
"""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.task_submission import TaskSubmission
from app.repositories.base import BaseRepository


class TaskSubmissionRepository(BaseRepository[TaskSubmission]):
    """TaskSubmission repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task submission repository."""
        super().__init__(TaskSubmission, session)

    async def exists_for(self, user_id: int, product_id: int) -> bool:
        """
        Check whether a user already submitted a product.

        Args:
            user_id: User ID
            product_id: Product ID

        Returns:
            True if a submission exists
        """
        return await self.exists(user_id=user_id, product_id=product_id)

    async def list_for_user(self, user_id: int) -> list[TaskSubmission]:
        """
        Get user's submissions with product loaded, newest first.

        Args:
            user_id: User ID

        Returns:
            List of submissions
        """
        stmt = (
            select(TaskSubmission)
            .where(TaskSubmission.user_id == user_id)
            .options(selectinload(TaskSubmission.product))
            .order_by(
                TaskSubmission.created_at.desc(),
                TaskSubmission.id.desc(),
            )
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_submitted_product_ids(self, user_id: int) -> list[int]:
        """
        Get IDs of products the user has already submitted.

        Args:
            user_id: User ID

        Returns:
            List of product IDs
        """
        stmt = select(TaskSubmission.product_id).where(
            TaskSubmission.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_since(self, since: datetime) -> int:
        """
        Count submissions created at or after a moment.

        Args:
            since: Lower bound (inclusive)

        Returns:
            Number of submissions
        """
        stmt = select(func.count(TaskSubmission.id)).where(
            TaskSubmission.created_at >= since
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0
