"""
Task service.

Entry point for task operations used by the API layer.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.task_submission import TaskSubmission
from app.repositories.task_submission_repository import (
    TaskSubmissionRepository,
)
from app.services.base_service import BaseService
from app.services.task.submission_engine import TaskSubmissionEngine


class TaskService(BaseService):
    """
    Task service.

    Resetting a user's task counter is an admin operation and lives on
    AdminService.reset_user_tasks, outside the submission rules.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task service."""
        super().__init__(session)
        self.engine = TaskSubmissionEngine(session)
        self.submission_repo = TaskSubmissionRepository(session)

    async def submit_task(self, user_id: int, product_id: int) -> TaskSubmission:
        """
        Submit a task.

        Args:
            user_id: Submitting user ID
            product_id: Claimed product ID

        Returns:
            Created TaskSubmission
        """
        return await self.engine.submit(user_id, product_id)

    async def get_user_tasks(self, user_id: int) -> list[TaskSubmission]:
        """
        Get user's submissions, newest first, with product details.

        Args:
            user_id: User ID

        Returns:
            List of submissions
        """
        return await self.submission_repo.list_for_user(user_id)
