"""
Model enums.

String constants stored in status/type columns.
"""

from enum import StrEnum


class RequestStatus(StrEnum):
    """Deposit and withdrawal request status."""

    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"


class AdminActionType(StrEnum):
    """Audited administrative actions."""

    RESET_TASKS = "reset_tasks"
    SET_BALANCE = "set_balance"
    SET_LEVEL = "set_level"
    SET_OVERRIDE = "set_override"
    SET_WALLET = "set_wallet"
    APPROVE_DEPOSIT = "approve_deposit"
    REJECT_DEPOSIT = "reject_deposit"
    APPROVE_WITHDRAWAL = "approve_withdrawal"
    REJECT_WITHDRAWAL = "reject_withdrawal"
