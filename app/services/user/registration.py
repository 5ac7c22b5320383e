"""
Account registration.

New accounts get a fresh referral code and, when a known invite code
is supplied, a link to the inviting user.
"""

import secrets

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import REFERRAL_CODE_LENGTH
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.services.base_service import TransactionRunner
from app.utils.exceptions import USER_ALREADY_EXISTS, ConflictError, ValidationError
from app.validators import validate_email, validate_phone, validate_username


def generate_referral_code() -> str:
    """Generate an uppercase hex referral code."""
    return secrets.token_hex(8).upper()[:REFERRAL_CODE_LENGTH]


class UserRegistrationMixin:
    """
    Registration methods for UserService.

    Credentials and login belong to the auth layer, not here.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.user_repo = UserRepository(session)
        self.registration_runner = TransactionRunner(session)

    async def register_user(
        self,
        username: str,
        email: str,
        phone: str | None = None,
        invite_code: str | None = None,
    ) -> User:
        """
        Create a user account and link its referrer.

        Args:
            username: Unique username
            email: Unique email address
            phone: Phone number (optional)
            invite_code: Referral code of the inviting user (optional).
                Unknown codes are stored but link no referrer.

        Returns:
            Created user

        Raises:
            ValidationError: If input is malformed
            ConflictError: If username or email is taken
        """
        is_valid, username, error = validate_username(username)
        if not is_valid:
            raise ValidationError(error)

        is_valid, email, error = validate_email(email)
        if not is_valid:
            raise ValidationError(error)

        if phone:
            is_valid, phone, error = validate_phone(phone)
            if not is_valid:
                raise ValidationError(error)

        async def _create() -> User:
            existing = await self.user_repo.get_by_username_or_email(
                username, email
            )
            if existing:
                raise ConflictError(USER_ALREADY_EXISTS, {"username": username})

            # Resolve the referrer from the invite code
            referred_by_id = None
            if invite_code:
                referrer = await self.user_repo.get_by_referral_code(invite_code)
                if referrer:
                    referred_by_id = referrer.id
                else:
                    logger.warning(
                        "Unknown invite code at registration",
                        extra={"username": username, "invite_code": invite_code},
                    )

            # Retry until the random code is unused
            while True:
                referral_code = generate_referral_code()
                taken = await self.user_repo.get_by_referral_code(referral_code)
                if not taken:
                    break

            return await self.user_repo.create(
                username=username,
                email=email,
                phone=phone,
                invite_code=invite_code,
                referral_code=referral_code,
                referred_by_id=referred_by_id,
            )

        try:
            user = await self.registration_runner.run(_create)
        except IntegrityError as e:
            # A concurrent signup won the unique constraint
            logger.warning(
                "Registration rejected by unique constraint",
                extra={"username": username, "email": email},
            )
            raise ConflictError(
                USER_ALREADY_EXISTS, {"username": username}
            ) from e

        logger.info(
            "User registered",
            extra={
                "user_id": user.id,
                "username": username,
                "referred_by_id": user.referred_by_id,
            },
        )
        return user
