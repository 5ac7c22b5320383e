"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.admin_action import AdminAction
from app.models.base import Base
from app.models.deposit import Deposit
from app.models.enums import AdminActionType, RequestStatus
from app.models.product import Product
from app.models.referral_bonus import ReferralBonus
from app.models.task_submission import TaskSubmission

# Core Models
from app.models.user import User
from app.models.user_task_override import UserTaskOverride
from app.models.withdrawal import Withdrawal

__all__ = [
    # Base
    "Base",
    # Enums
    "AdminActionType",
    "RequestStatus",
    # Core Models
    "User",
    "Product",
    "UserTaskOverride",
    "TaskSubmission",
    "ReferralBonus",
    # Funds
    "Deposit",
    "Withdrawal",
    # Audit
    "AdminAction",
]
