"""
Services.

Business logic layer.
"""

# Base Service Infrastructure
from app.services.base_service import (
    BaseService,
    TransactionRunner,
    transaction,
)
from app.services.balance_manager import BalanceManager

# Core Services
from app.services.task import TaskService, TaskSubmissionEngine
from app.services.product_service import AvailableProduct, ProductService
from app.services.user import UserService

# Admin Services
from app.services.admin import AdminService, DashboardStats


__all__ = [
    # Base Infrastructure
    "BaseService",
    "TransactionRunner",
    "transaction",
    "BalanceManager",
    # Core Services
    "TaskService",
    "TaskSubmissionEngine",
    "ProductService",
    "AvailableProduct",
    "UserService",
    # Admin Services
    "AdminService",
    "DashboardStats",
]
