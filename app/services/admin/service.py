"""
AdminService.

Combines the admin mixins over one session and one set of repositories.
"""

from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.admin_action_repository import AdminActionRepository
from app.repositories.deposit_repository import DepositRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.task_submission_repository import (
    TaskSubmissionRepository,
)
from app.repositories.user_repository import UserRepository
from app.repositories.user_task_override_repository import (
    UserTaskOverrideRepository,
)
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.services.balance_manager import BalanceManager
from app.services.base_service import BaseService
from app.utils.datetime_utils import utc_now

from .dashboard import AdminDashboardMixin
from .funds_review import AdminFundsReviewMixin
from .user_management import AdminUserManagementMixin


class AdminService(
    AdminFundsReviewMixin,
    AdminUserManagementMixin,
    AdminDashboardMixin,
    BaseService,
):
    """
    Administrative operations.

    Write methods run in their own transaction via the transaction
    decorator and record an AdminAction audit row before committing.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize admin service.

        Args:
            session: Database session
            clock: Source of the current instant (dashboard day boundary)
        """
        super().__init__(session)
        self.clock = clock
        self.user_repo = UserRepository(session)
        self.product_repo = ProductRepository(session)
        self.submission_repo = TaskSubmissionRepository(session)
        self.override_repo = UserTaskOverrideRepository(session)
        self.deposit_repo = DepositRepository(session)
        self.withdrawal_repo = WithdrawalRepository(session)
        self.action_repo = AdminActionRepository(session)
        self.balance_manager = BalanceManager(session)
