"""
Deposit and withdrawal review.

Approving a deposit credits the user; rejecting a withdrawal returns the
amount deducted when it was requested.
"""

from app.models.deposit import Deposit
from app.models.enums import AdminActionType, RequestStatus
from app.models.withdrawal import Withdrawal
from app.services.base_service import transaction
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import (
    DEPOSIT_NOT_FOUND,
    REQUEST_ALREADY_PROCESSED,
    WITHDRAWAL_NOT_FOUND,
    InvalidStateError,
    NotFoundError,
)


def _ensure_pending(request: Deposit | Withdrawal) -> None:
    """Reject requests that were already approved or rejected."""
    if request.status != RequestStatus.PENDING.value:
        raise InvalidStateError(
            REQUEST_ALREADY_PROCESSED,
            {"request_id": request.id, "status": request.status},
        )


class AdminFundsReviewMixin:
    """Deposit and withdrawal approval for AdminService."""

    async def _get_pending_deposit(self, deposit_id: int) -> Deposit:
        deposit = await self.deposit_repo.get_for_update(deposit_id)
        if not deposit:
            raise NotFoundError(DEPOSIT_NOT_FOUND, {"deposit_id": deposit_id})
        _ensure_pending(deposit)
        return deposit

    async def _get_pending_withdrawal(self, withdrawal_id: int) -> Withdrawal:
        withdrawal = await self.withdrawal_repo.get_for_update(withdrawal_id)
        if not withdrawal:
            raise NotFoundError(
                WITHDRAWAL_NOT_FOUND, {"withdrawal_id": withdrawal_id}
            )
        _ensure_pending(withdrawal)
        return withdrawal

    @transaction
    async def approve_deposit(
        self, deposit_id: int, admin_id: int | None = None
    ) -> Deposit:
        """
        Approve a pending deposit and credit the user's balance.

        Args:
            deposit_id: Deposit ID
            admin_id: Acting admin

        Returns:
            Completed deposit

        Raises:
            NotFoundError: If deposit does not exist
            InvalidStateError: If deposit is not pending
        """
        deposit = await self._get_pending_deposit(deposit_id)
        deposit.status = RequestStatus.COMPLETED.value
        deposit.processed_at = utc_now()

        new_balance = await self.balance_manager.adjust_balance(
            deposit.user_id, deposit.amount, reason="deposit_approved"
        )
        await self.action_repo.record(
            AdminActionType.APPROVE_DEPOSIT,
            deposit.user_id,
            admin_id=admin_id,
            details={
                "deposit_id": deposit.id,
                "amount": str(deposit.amount),
                "balance_after": str(new_balance),
            },
        )

        self.logger.info(
            "Deposit approved",
            extra={
                "deposit_id": deposit.id,
                "user_id": deposit.user_id,
                "amount": str(deposit.amount),
                "admin_id": admin_id,
            },
        )
        return deposit

    @transaction
    async def reject_deposit(
        self, deposit_id: int, admin_id: int | None = None
    ) -> Deposit:
        """Reject a pending deposit. The balance is not touched."""
        deposit = await self._get_pending_deposit(deposit_id)
        deposit.status = RequestStatus.REJECTED.value
        deposit.processed_at = utc_now()

        await self.action_repo.record(
            AdminActionType.REJECT_DEPOSIT,
            deposit.user_id,
            admin_id=admin_id,
            details={"deposit_id": deposit.id, "amount": str(deposit.amount)},
        )
        await self.session.flush()

        self.logger.info(
            "Deposit rejected",
            extra={
                "deposit_id": deposit.id,
                "user_id": deposit.user_id,
                "admin_id": admin_id,
            },
        )
        return deposit

    @transaction
    async def approve_withdrawal(
        self, withdrawal_id: int, admin_id: int | None = None
    ) -> Withdrawal:
        """
        Mark a pending withdrawal as paid out.

        The amount was already deducted when the request was created.
        """
        withdrawal = await self._get_pending_withdrawal(withdrawal_id)
        withdrawal.status = RequestStatus.COMPLETED.value
        withdrawal.processed_at = utc_now()

        await self.action_repo.record(
            AdminActionType.APPROVE_WITHDRAWAL,
            withdrawal.user_id,
            admin_id=admin_id,
            details={
                "withdrawal_id": withdrawal.id,
                "amount": str(withdrawal.amount),
            },
        )
        await self.session.flush()

        self.logger.info(
            "Withdrawal approved",
            extra={
                "withdrawal_id": withdrawal.id,
                "user_id": withdrawal.user_id,
                "amount": str(withdrawal.amount),
                "admin_id": admin_id,
            },
        )
        return withdrawal

    @transaction
    async def reject_withdrawal(
        self, withdrawal_id: int, admin_id: int | None = None
    ) -> Withdrawal:
        """
        Reject a pending withdrawal and return its amount to the user.

        Args:
            withdrawal_id: Withdrawal ID
            admin_id: Acting admin

        Returns:
            Rejected withdrawal

        Raises:
            NotFoundError: If withdrawal does not exist
            InvalidStateError: If withdrawal is not pending
        """
        withdrawal = await self._get_pending_withdrawal(withdrawal_id)
        withdrawal.status = RequestStatus.REJECTED.value
        withdrawal.processed_at = utc_now()

        new_balance = await self.balance_manager.adjust_balance(
            withdrawal.user_id, withdrawal.amount, reason="withdrawal_rejected"
        )
        await self.action_repo.record(
            AdminActionType.REJECT_WITHDRAWAL,
            withdrawal.user_id,
            admin_id=admin_id,
            details={
                "withdrawal_id": withdrawal.id,
                "amount": str(withdrawal.amount),
                "balance_after": str(new_balance),
            },
        )

        self.logger.info(
            "Withdrawal rejected, balance restored",
            extra={
                "withdrawal_id": withdrawal.id,
                "user_id": withdrawal.user_id,
                "amount": str(withdrawal.amount),
                "admin_id": admin_id,
            },
        )
        return withdrawal
