"""
Admin user management.

Direct changes to user balances, levels, payout wallets, debit overrides
and the task counter. These bypass the submission rules on purpose and are audited.
"""

from collections.abc import Iterable
from decimal import Decimal

from app.config.business_constants import USER_LEVELS
from app.models.enums import AdminActionType
from app.models.user import User
from app.models.user_task_override import UserTaskOverride
from app.services.base_service import transaction
from app.utils.exceptions import (
    PRODUCT_NOT_FOUND,
    USER_NOT_FOUND,
    NotFoundError,
    ValidationError,
)
from app.validators import validate_amount
from app.validators.common import MAX_AMOUNT


class AdminUserManagementMixin:
    """User overrides for AdminService."""

    async def _lock_user(self, user_id: int) -> User:
        user = await self.user_repo.get_for_update(user_id)
        if not user:
            raise NotFoundError(USER_NOT_FOUND, {"user_id": user_id})
        return user

    @transaction
    async def set_user_balance(
        self,
        user_id: int,
        balance: Decimal | str | int,
        admin_id: int | None = None,
        reason: str | None = None,
    ) -> User:
        """
        Set a user's balance to an absolute value.

        The value may be negative, which blocks further task submissions
        until the balance is restored.

        Args:
            user_id: User ID
            balance: New balance
            admin_id: Acting admin
            reason: Free-form note stored in the audit row

        Returns:
            Updated user
        """
        is_valid, target, error = validate_amount(
            balance, min_amount=-MAX_AMOUNT, allow_zero=True
        )
        if not is_valid:
            raise ValidationError(error, {"balance": str(balance)})

        user = await self._lock_user(user_id)
        previous = user.balance
        await self.balance_manager.adjust_balance(
            user_id, target - previous, reason="admin_set_balance"
        )
        await self.action_repo.record(
            AdminActionType.SET_BALANCE,
            user_id,
            admin_id=admin_id,
            details={
                "previous": str(previous),
                "balance": str(target),
                "reason": reason,
            },
        )

        self.logger.warning(
            "Balance overridden by admin",
            extra={
                "user_id": user_id,
                "previous": str(previous),
                "balance": str(target),
                "admin_id": admin_id,
            },
        )
        return user

    @transaction
    async def set_user_negative_override(
        self,
        user_id: int,
        product_ids: Iterable[int],
        negative_amount: Decimal | str | int,
        admin_id: int | None = None,
    ) -> list[UserTaskOverride]:
        """
        Replace the user's debit overrides for the given products.

        Args:
            user_id: User ID
            product_ids: Products to override
            negative_amount: Debit applied to each of them
            admin_id: Acting admin

        Returns:
            Created overrides
        """
        is_valid, amount, error = validate_amount(
            negative_amount, allow_zero=True
        )
        if not is_valid:
            raise ValidationError(
                error, {"negative_amount": str(negative_amount)}
            )

        ids = list(dict.fromkeys(product_ids))
        if not ids:
            raise ValidationError("At least one product is required")

        await self._lock_user(user_id)
        for product_id in ids:
            if not await self.product_repo.get_by_id(product_id):
                raise NotFoundError(
                    PRODUCT_NOT_FOUND, {"product_id": product_id}
                )

        overrides = await self.override_repo.replace_for_products(
            user_id, ids, amount
        )
        await self.action_repo.record(
            AdminActionType.SET_OVERRIDE,
            user_id,
            admin_id=admin_id,
            details={"product_ids": ids, "negative_amount": str(amount)},
        )

        self.logger.info(
            "Task overrides replaced",
            extra={
                "user_id": user_id,
                "product_ids": ids,
                "negative_amount": str(amount),
                "admin_id": admin_id,
            },
        )
        return overrides

    @transaction
    async def set_user_level(
        self, user_id: int, level: int, admin_id: int | None = None
    ) -> User:
        """Upgrade or downgrade a user's tier."""
        if level not in USER_LEVELS:
            raise ValidationError(
                f"Unknown user level: {level}", {"level": level}
            )

        user = await self._lock_user(user_id)
        previous = user.level
        user.level = level
        await self.action_repo.record(
            AdminActionType.SET_LEVEL,
            user_id,
            admin_id=admin_id,
            details={"previous": previous, "level": level},
        )

        self.logger.info(
            "User level changed",
            extra={
                "user_id": user_id,
                "previous": previous,
                "level": level,
                "admin_id": admin_id,
            },
        )
        return user

    @transaction
    async def set_user_wallet(
        self,
        user_id: int,
        wallet_address: str,
        wallet_network: str,
        admin_id: int | None = None,
    ) -> User:
        """
        Replace the payout wallet stored on a user's profile.

        Args:
            user_id: User ID
            wallet_address: Wallet address
            wallet_network: Network the address belongs to (e.g. TRC20)
            admin_id: Acting admin

        Returns:
            Updated user
        """
        address = (wallet_address or "").strip()
        network = (wallet_network or "").strip()
        if not address or not network:
            raise ValidationError(
                "Wallet address and network are required",
                {"user_id": user_id},
            )
        if len(address) > 255 or len(network) > 50:
            raise ValidationError(
                "Wallet address or network is too long", {"user_id": user_id}
            )

        user = await self._lock_user(user_id)
        previous = {
            "wallet_address": user.wallet_address,
            "wallet_network": user.wallet_network,
        }
        user.wallet_address = address
        user.wallet_network = network
        await self.action_repo.record(
            AdminActionType.SET_WALLET,
            user_id,
            admin_id=admin_id,
            details={
                "previous": previous,
                "wallet_address": address,
                "wallet_network": network,
            },
        )

        self.logger.info(
            "User wallet changed",
            extra={
                "user_id": user_id,
                "wallet_network": network,
                "admin_id": admin_id,
            },
        )
        return user

    @transaction
    async def reset_user_tasks(
        self,
        user_id: int,
        admin_id: int | None = None,
        reason: str | None = None,
    ) -> User:
        """
        Reset a user's completed task counter to zero.

        Privileged escape hatch: it ignores the level caps and the balance
        checks of task submission. Submissions themselves are kept, so
        already claimed products stay claimed.

        Args:
            user_id: User ID
            admin_id: Acting admin
            reason: Free-form note stored in the audit row

        Returns:
            Updated user
        """
        user = await self._lock_user(user_id)
        previous = user.completed_tasks
        user.completed_tasks = 0
        await self.action_repo.record(
            AdminActionType.RESET_TASKS,
            user_id,
            admin_id=admin_id,
            details={"previous_completed_tasks": previous, "reason": reason},
        )

        self.logger.warning(
            "Completed tasks reset by admin",
            extra={
                "user_id": user_id,
                "previous_completed_tasks": previous,
                "admin_id": admin_id,
                "reason": reason,
            },
        )
        return user
