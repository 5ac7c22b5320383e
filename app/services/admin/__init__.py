"""
Admin services package.

Privileged operations, every mutation audited with an AdminAction row
written in the same transaction:
- funds_review.py: Deposit and withdrawal approval/rejection
- user_management.py: Balance, level, override and task counter changes
- dashboard.py: Platform statistics and user listings
- service.py: AdminService combining the above
"""

from .dashboard import DashboardStats
from .service import AdminService


__all__ = [
    "AdminService",
    "DashboardStats",
]
