"""
Task submission engine.

Validates and executes one user's claim of one product: balance floors,
level task caps, per-user debit overrides, profit computation and the
referral bonus fan-out, all inside a single transaction.
"""

from collections.abc import Callable
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    MINIMUM_FIRST_TASK_BALANCE,
    TASK_LIMITS,
    UserLevel,
    get_task_limit,
)
from app.models.product import Product
from app.models.task_submission import TaskSubmission
from app.models.user import User
from app.repositories.product_repository import ProductRepository
from app.repositories.referral_bonus_repository import ReferralBonusRepository
from app.repositories.task_submission_repository import (
    TaskSubmissionRepository,
)
from app.repositories.user_repository import UserRepository
from app.repositories.user_task_override_repository import (
    UserTaskOverrideRepository,
)
from app.services.balance_manager import BalanceManager
from app.services.base_service import BaseService
from app.services.task.calculator import (
    SubmissionAmounts,
    calculate_submission_amounts,
    resolve_debit_amount,
)
from app.utils.datetime_utils import ensure_utc, utc_now
from app.utils.exceptions import (
    INSUFFICIENT_TASK_BALANCE,
    MINIMUM_BALANCE_REQUIRED,
    NEGATIVE_BALANCE,
    PRODUCT_NOT_FOUND,
    PRODUCT_UNAVAILABLE,
    TASK_ALREADY_COMPLETED,
    UPGRADE_OR_WITHDRAW,
    USER_NOT_FOUND,
    WITHDRAW_FIRST,
    AppError,
    ConflictError,
    InsufficientFundsError,
    InvalidStateError,
    LimitReachedError,
    NotFoundError,
)


class TaskSubmissionEngine(BaseService):
    """
    Executes task submissions.

    Preconditions are checked in a fixed order and the first failure is
    raised before anything is written. The submitter row is locked by the
    first read, so the balance checks and the balance write belong to the
    same transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize submission engine.

        Args:
            session: Async database session
            clock: Source of the current instant (product expiry checks)
        """
        super().__init__(session)
        self.clock = clock
        self.user_repo = UserRepository(session)
        self.product_repo = ProductRepository(session)
        self.submission_repo = TaskSubmissionRepository(session)
        self.override_repo = UserTaskOverrideRepository(session)
        self.bonus_repo = ReferralBonusRepository(session)
        self.balance_manager = BalanceManager(session)

    async def submit(self, user_id: int, product_id: int) -> TaskSubmission:
        """
        Submit a task for a user.

        Args:
            user_id: Submitting user ID
            product_id: Claimed product ID

        Returns:
            Created TaskSubmission (committed)

        Raises:
            NotFoundError: User or product missing
            InvalidStateError: Negative balance, unavailable product or
                first-task minimum not met
            ConflictError: Product already submitted by this user
            LimitReachedError: Level task cap reached
            InsufficientFundsError: Balance below the effective debit
        """
        try:
            submission = await self.runner.run(
                lambda: self._submit(user_id, product_id)
            )
        except IntegrityError as e:
            # Concurrent duplicate lost the race on the unique constraint
            self.logger.warning(
                "Task submission rejected by unique constraint",
                extra={"user_id": user_id, "product_id": product_id},
            )
            raise ConflictError(
                TASK_ALREADY_COMPLETED,
                {"user_id": user_id, "product_id": product_id},
            ) from e
        except AppError as e:
            self.logger.warning(
                f"Task submission rejected: {e.message}",
                extra={
                    "user_id": user_id,
                    "product_id": product_id,
                    "code": e.code,
                },
            )
            raise
        except Exception as e:
            self.logger.opt(exception=True).error(
                "Task submission failed, transaction rolled back",
                extra={
                    "user_id": user_id,
                    "product_id": product_id,
                    "error": str(e),
                },
            )
            raise

        self.logger.info(
            "Task submitted",
            extra={
                "user_id": user_id,
                "product_id": product_id,
                "submission_id": submission.id,
                "profit_earned": str(submission.profit_earned),
                "amount_debited": str(submission.amount_debited),
            },
        )
        return submission

    async def _submit(self, user_id: int, product_id: int) -> TaskSubmission:
        """Validate, compute and write. Runs inside the transaction."""
        user = await self.user_repo.get_for_update(user_id)
        if not user:
            raise NotFoundError(USER_NOT_FOUND, {"user_id": user_id})

        if user.balance < 0:
            raise InvalidStateError(NEGATIVE_BALANCE, {"user_id": user_id})

        if await self.submission_repo.exists_for(user_id, product_id):
            raise ConflictError(
                TASK_ALREADY_COMPLETED,
                {"user_id": user_id, "product_id": product_id},
            )

        product = await self.product_repo.get_by_id(product_id)
        if not product:
            raise NotFoundError(PRODUCT_NOT_FOUND, {"product_id": product_id})

        if not self.is_claimable(product):
            raise InvalidStateError(
                PRODUCT_UNAVAILABLE, {"product_id": product_id}
            )

        self._check_first_task_minimum(user)
        self._check_task_limit(user)

        override = await self.override_repo.find_override(user_id, product_id)
        debit_amount = resolve_debit_amount(product, override)

        if user.balance < debit_amount:
            raise InsufficientFundsError(
                INSUFFICIENT_TASK_BALANCE,
                {
                    "user_id": user_id,
                    "balance": str(user.balance),
                    "required": str(debit_amount),
                },
            )

        amounts = calculate_submission_amounts(
            user.balance, user.level, debit_amount
        )
        return await self._write_submission(user, product, amounts)

    async def _write_submission(
        self, user: User, product: Product, amounts: SubmissionAmounts
    ) -> TaskSubmission:
        """Persist submission, submitter update and referral bonuses."""
        submission = await self.submission_repo.create(
            user_id=user.id,
            product_id=product.id,
            profit_earned=amounts.profit_earned,
            amount_debited=amounts.amount_debited,
        )

        await self.balance_manager.adjust_balance(
            user.id, amounts.balance_delta, reason="task_submission"
        )
        user.completed_tasks += 1
        await self.session.flush()

        referred_users = await self.user_repo.find_referred_users(user.id)
        for referred_user in referred_users:
            await self.bonus_repo.create(
                referrer_id=user.id,
                referred_user_id=referred_user.id,
                task_submission_id=submission.id,
                bonus_amount=amounts.referral_bonus,
            )
            # Funded externally, the referrer is not debited
            await self.balance_manager.adjust_balance(
                referred_user.id,
                amounts.referral_bonus,
                reason="referral_bonus",
            )

        if referred_users:
            self.logger.info(
                "Referral bonuses credited",
                extra={
                    "referrer_id": user.id,
                    "submission_id": submission.id,
                    "bonus_amount": str(amounts.referral_bonus),
                    "recipients": len(referred_users),
                },
            )

        return submission

    def is_claimable(self, product: Product) -> bool:
        """
        Check whether a product can be claimed right now.

        Args:
            product: Product to check

        Returns:
            True if active and end_date is strictly in the future
        """
        return product.is_active and ensure_utc(product.end_date) > self.clock()

    @staticmethod
    def _check_first_task_minimum(user: User) -> None:
        """Require the minimum balance before the first task."""
        if user.completed_tasks == 0 and user.balance < MINIMUM_FIRST_TASK_BALANCE:
            raise InvalidStateError(
                MINIMUM_BALANCE_REQUIRED,
                {"user_id": user.id, "balance": str(user.balance)},
            )

    @staticmethod
    def _check_task_limit(user: User) -> None:
        """Enforce the level task cap."""
        limit = get_task_limit(user.level)
        if user.completed_tasks < limit:
            return

        details = {
            "user_id": user.id,
            "level": user.level,
            "completed_tasks": user.completed_tasks,
            "limit": limit,
        }
        if (
            user.level == UserLevel.STANDARD
            and user.completed_tasks == TASK_LIMITS[UserLevel.STANDARD]
        ):
            raise LimitReachedError(UPGRADE_OR_WITHDRAW, details)
        raise LimitReachedError(WITHDRAW_FIRST, details)
