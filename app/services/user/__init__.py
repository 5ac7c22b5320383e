"""
User service module.

Provides user management functionality: registration with referral
support, profile management, deposit and withdrawal requests.

Structure:
- core.py: Core user retrieval and profile management
- registration.py: User registration with referral support
- funds.py: Deposit and withdrawal requests

Usage:
    from app.services.user import UserService

    user_service = UserService(session)
    user = await user_service.register_user("alice", "alice@example.com")
    deposit = await user_service.create_deposit(user.id, "TRC20", "T...", "100")
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.services.user.core import UserServiceCore
from app.services.user.funds import UserFundsMixin
from app.services.user.registration import UserRegistrationMixin


class UserService(
    UserServiceCore,
    UserRegistrationMixin,
    UserFundsMixin,
):
    """
    Combined user service.

    Inherits from all user service mixins to provide complete functionality.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize user service with all mixins.

        Args:
            session: Database session
        """
        UserServiceCore.__init__(self, session)
        UserRegistrationMixin.__init__(self, session)
        UserFundsMixin.__init__(self, session)


__all__ = ["UserService"]
