"""
User repository.

Data access layer for User model.
"""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_referral_code(
        self, referral_code: str
    ) -> User | None:
        """
        Get user by referral code.

        Args:
            referral_code: Referral code

        Returns:
            User or None
        """
        return await self.get_by(referral_code=referral_code)

    async def get_by_username_or_email(
        self, username: str, email: str
    ) -> User | None:
        """
        Get first user matching either username or email.

        Args:
            username: Username
            email: Email address

        Returns:
            User or None
        """
        stmt = (
            select(User)
            .where(or_(User.username == username, User.email == email))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_referred_users(self, referrer_id: int) -> list[User]:
        """
        Get direct referrals of a user (one level only).

        Args:
            referrer_id: Referring user ID

        Returns:
            Users whose referred_by_id equals referrer_id, ordered by id
        """
        stmt = (
            select(User)
            .where(User.referred_by_id == referrer_id)
            .order_by(User.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_with_funds_history(self, user_id: int) -> User | None:
        """
        Get user with deposits and withdrawals loaded.

        Args:
            user_id: User ID

        Returns:
            User with relationships or None
        """
        stmt = (
            select(User)
            .where(User.id == user_id)
            .options(
                selectinload(User.deposits),
                selectinload(User.withdrawals),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_all_newest_first(self) -> list[User]:
        """Get all users ordered by registration time, newest first."""
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
