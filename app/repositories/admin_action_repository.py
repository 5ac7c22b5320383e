"""
AdminAction repository.

Data access layer for the admin audit trail.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.admin_action import AdminAction
from app.models.enums import AdminActionType
from app.repositories.base import BaseRepository


class AdminActionRepository(BaseRepository[AdminAction]):
    """AdminAction repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize admin action repository."""
        super().__init__(AdminAction, session)

    async def record(
        self,
        action_type: AdminActionType,
        target_user_id: int | None,
        admin_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> AdminAction:
        """
        Append an audit entry.

        Args:
            action_type: Performed action
            target_user_id: Affected user
            admin_id: Acting admin
            details: JSON-serializable payload

        Returns:
            Created audit entry
        """
        return await self.create(
            action_type=action_type.value,
            target_user_id=target_user_id,
            admin_id=admin_id,
            details=details or {},
        )

    async def get_for_user(self, target_user_id: int) -> list[AdminAction]:
        """Get audit entries for a user, newest first."""
        stmt = (
            select(AdminAction)
            .where(AdminAction.target_user_id == target_user_id)
            .order_by(AdminAction.created_at.desc(), AdminAction.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
