"""
User funds functionality.

Deposit and withdrawal requests. Deposits credit the balance only when an
admin approves them; withdrawals deduct immediately and are restored if
rejected.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.deposit import Deposit
from app.models.enums import RequestStatus
from app.models.withdrawal import Withdrawal
from app.repositories.deposit_repository import DepositRepository
from app.repositories.user_repository import UserRepository
from app.repositories.withdrawal_repository import WithdrawalRepository
from app.services.balance_manager import BalanceManager
from app.services.base_service import TransactionRunner
from app.utils.exceptions import (
    INSUFFICIENT_BALANCE,
    USER_NOT_FOUND,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from app.validators import validate_amount


class UserFundsMixin:
    """Mixin for deposit and withdrawal requests."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user funds mixin."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.deposit_repo = DepositRepository(session)
        self.withdrawal_repo = WithdrawalRepository(session)
        self.balance_manager = BalanceManager(session)
        self.funds_runner = TransactionRunner(session)

    @staticmethod
    def _parse_amount(amount: Decimal | str | int) -> Decimal:
        """Validate a positive request amount."""
        is_valid, value, error = validate_amount(amount)
        if not is_valid:
            raise ValidationError(error, {"amount": str(amount)})
        return value

    async def create_deposit(
        self,
        user_id: int,
        network: str,
        wallet_address: str,
        amount: Decimal | str | int,
    ) -> Deposit:
        """
        Create a pending deposit request.

        Args:
            user_id: User ID
            network: Payment network name
            wallet_address: Source wallet
            amount: Deposit amount

        Returns:
            Pending deposit
        """
        value = self._parse_amount(amount)

        async def _create() -> Deposit:
            if not await self.user_repo.get_by_id(user_id):
                raise NotFoundError(USER_NOT_FOUND, {"user_id": user_id})
            return await self.deposit_repo.create(
                user_id=user_id,
                network=network,
                wallet_address=wallet_address,
                amount=value,
                status=RequestStatus.PENDING.value,
            )

        deposit = await self.funds_runner.run(_create)
        logger.info(
            "Deposit requested",
            extra={
                "user_id": user_id,
                "deposit_id": deposit.id,
                "amount": str(value),
            },
        )
        return deposit

    async def create_withdrawal(
        self,
        user_id: int,
        network: str,
        wallet_address: str,
        amount: Decimal | str | int,
    ) -> Withdrawal:
        """
        Create a withdrawal request and deduct its amount.

        Args:
            user_id: User ID
            network: Payout network name
            wallet_address: Destination wallet
            amount: Withdrawal amount

        Returns:
            Pending withdrawal

        Raises:
            NotFoundError: If user does not exist
            InsufficientFundsError: If balance is below amount
        """
        value = self._parse_amount(amount)

        async def _create() -> Withdrawal:
            user = await self.user_repo.get_for_update(user_id)
            if not user:
                raise NotFoundError(USER_NOT_FOUND, {"user_id": user_id})

            if user.balance < value:
                raise InsufficientFundsError(
                    INSUFFICIENT_BALANCE,
                    {
                        "user_id": user_id,
                        "available": str(user.balance),
                        "requested": str(value),
                    },
                )

            withdrawal = await self.withdrawal_repo.create(
                user_id=user_id,
                network=network,
                wallet_address=wallet_address,
                amount=value,
                status=RequestStatus.PENDING.value,
            )
            await self.balance_manager.adjust_balance(
                user_id, -value, reason="withdrawal_request"
            )
            return withdrawal

        try:
            withdrawal = await self.funds_runner.run(_create)
        except InsufficientFundsError as e:
            logger.warning(
                "Insufficient balance for withdrawal",
                extra={"user_id": user_id, **e.details},
            )
            raise

        logger.info(
            "Withdrawal requested",
            extra={
                "user_id": user_id,
                "withdrawal_id": withdrawal.id,
                "amount": str(value),
            },
        )
        return withdrawal
