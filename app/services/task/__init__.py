"""
Task services package.

- calculator: pure amount calculations (profit, debit, referral bonus)
- submission_engine: validated, atomic task submission
- service: TaskService facade
"""

from app.services.task.calculator import (
    SubmissionAmounts,
    calculate_submission_amounts,
    resolve_debit_amount,
)
from app.services.task.service import TaskService
from app.services.task.submission_engine import TaskSubmissionEngine


__all__ = [
    "SubmissionAmounts",
    "calculate_submission_amounts",
    "resolve_debit_amount",
    "TaskService",
    "TaskSubmissionEngine",
]
