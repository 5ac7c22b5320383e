"""
Core user service functionality.

Handles basic user retrieval operations and profile management.
"""

from typing import Any

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.services.base_service import TransactionRunner
from app.utils.exceptions import (
    USER_ALREADY_EXISTS,
    USER_NOT_FOUND,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.validators import validate_email, validate_phone


# Profile fields a user may change on their own account
PROFILE_FIELDS = frozenset({
    "name",
    "email",
    "phone",
    "country",
    "wallet_address",
    "wallet_network",
})


class UserServiceCore:
    """
    Core user service.

    Provides basic user retrieval and profile management methods.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize user service core.

        Args:
            session: Database session
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.profile_runner = TransactionRunner(session)

    async def get_by_id(self, user_id: int) -> User | None:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User or None
        """
        return await self.user_repo.get_by_id(user_id)

    async def get_user_details(self, user_id: int) -> User:
        """
        Get user with deposit and withdrawal history.

        Args:
            user_id: User ID

        Returns:
            User with deposits and withdrawals loaded

        Raises:
            NotFoundError: If user does not exist
        """
        user = await self.user_repo.get_with_funds_history(user_id)
        if not user:
            raise NotFoundError(USER_NOT_FOUND, {"user_id": user_id})
        return user

    async def update_profile(self, user_id: int, **fields: Any) -> User:
        """
        Update non-credential profile fields.

        Empty values are ignored, unknown fields are rejected.

        Args:
            user_id: User ID
            **fields: Profile fields to change

        Returns:
            Updated user

        Raises:
            NotFoundError: If user does not exist
            ValidationError: On unknown fields or malformed values
        """
        unknown = set(fields) - PROFILE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown profile fields: {', '.join(sorted(unknown))}"
            )

        updates = {key: value for key, value in fields.items() if value}

        if "email" in updates:
            is_valid, email, error = validate_email(updates["email"])
            if not is_valid:
                raise ValidationError(error)
            updates["email"] = email

        if "phone" in updates:
            is_valid, phone, error = validate_phone(updates["phone"])
            if not is_valid:
                raise ValidationError(error)
            updates["phone"] = phone

        async def _update() -> User:
            user = await self.user_repo.update(user_id, **updates)
            if not user:
                raise NotFoundError(USER_NOT_FOUND, {"user_id": user_id})
            return user

        try:
            user = await self.profile_runner.run(_update)
        except IntegrityError as e:
            raise ConflictError(USER_ALREADY_EXISTS, {"user_id": user_id}) from e

        logger.info(
            "Profile updated",
            extra={"user_id": user_id, "fields": sorted(updates)},
        )
        return user
