"""
Admin dashboard queries.
"""

from dataclasses import dataclass
from decimal import Decimal

from app.models.deposit import Deposit
from app.models.user import User
from app.models.withdrawal import Withdrawal
from app.utils.datetime_utils import start_of_day


@dataclass(frozen=True)
class DashboardStats:
    """Platform totals shown on the admin dashboard."""

    total_users: int
    total_orders: int
    todays_transactions: int
    pending_payout: Decimal


class AdminDashboardMixin:
    """Read-only queries for AdminService."""

    async def get_dashboard_stats(self) -> DashboardStats:
        """
        Collect dashboard totals.

        Returns:
            DashboardStats with user count, submission count, submissions
            since UTC midnight and the sum of pending withdrawals
        """
        return DashboardStats(
            total_users=await self.user_repo.count(),
            total_orders=await self.submission_repo.count(),
            todays_transactions=await self.submission_repo.count_since(
                start_of_day(self.clock())
            ),
            pending_payout=await self.withdrawal_repo.get_pending_total(),
        )

    async def list_users(self) -> list[User]:
        """Get all users, newest first."""
        return await self.user_repo.find_all_newest_first()

    async def get_user_deposits(self, user_id: int) -> list[Deposit]:
        """Get a user's deposits, newest first."""
        return await self.deposit_repo.get_user_deposits(user_id)

    async def get_user_withdrawals(self, user_id: int) -> list[Withdrawal]:
        """Get a user's withdrawals, newest first."""
        return await self.withdrawal_repo.get_user_withdrawals(user_id)
