"""
Unit tests for TaskSubmissionEngine precondition order.

Repositories are replaced with mocks; nothing touches a database.
"""

import re
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.services.task.submission_engine import TaskSubmissionEngine
from app.utils.exceptions import (
    INSUFFICIENT_TASK_BALANCE,
    MINIMUM_BALANCE_REQUIRED,
    NEGATIVE_BALANCE,
    PRODUCT_NOT_FOUND,
    PRODUCT_UNAVAILABLE,
    TASK_ALREADY_COMPLETED,
    UPGRADE_OR_WITHDRAW,
    USER_NOT_FOUND,
    WITHDRAW_FIRST,
    ConflictError,
    InsufficientFundsError,
    InvalidStateError,
    LimitReachedError,
    NotFoundError,
)


FIXED_NOW = datetime(2026, 3, 15, 12, 0, 0, tzinfo=UTC)


def _user(**overrides):
    values = {
        "id": 1,
        "balance": Decimal("100"),
        "level": 1,
        "completed_tasks": 5,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def _product(**overrides):
    values = {
        "id": 3,
        "negative_amount": Decimal("20"),
        "is_active": True,
        "end_date": FIXED_NOW + timedelta(days=1),
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def engine(mock_session):
    """Engine with mocked repositories and a fixed clock."""
    engine = TaskSubmissionEngine(mock_session, clock=lambda: FIXED_NOW)
    engine.user_repo = AsyncMock()
    engine.product_repo = AsyncMock()
    engine.submission_repo = AsyncMock()
    engine.override_repo = AsyncMock()
    engine.bonus_repo = AsyncMock()
    engine.balance_manager = AsyncMock()

    engine.user_repo.get_for_update.return_value = _user()
    engine.user_repo.find_referred_users.return_value = []
    engine.submission_repo.exists_for.return_value = False
    engine.product_repo.get_by_id.return_value = _product()
    engine.override_repo.find_override.return_value = None
    engine.submission_repo.create.return_value = SimpleNamespace(
        id=10, profit_earned=Decimal("0.75"), amount_debited=Decimal("20")
    )
    return engine


class TestPreconditionOrder:
    """First failing check wins and nothing is written."""

    @pytest.mark.asyncio
    async def test_missing_user(self, engine, mock_session):
        engine.user_repo.get_for_update.return_value = None

        with pytest.raises(NotFoundError, match=USER_NOT_FOUND):
            await engine.submit(1, 3)

        engine.submission_repo.exists_for.assert_not_awaited()
        mock_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_negative_balance_checked_before_product(self, engine):
        engine.user_repo.get_for_update.return_value = _user(
            balance=Decimal("-0.01")
        )
        engine.product_repo.get_by_id.return_value = None

        with pytest.raises(InvalidStateError, match=NEGATIVE_BALANCE):
            await engine.submit(1, 3)

        engine.product_repo.get_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_checked_before_product(self, engine):
        engine.submission_repo.exists_for.return_value = True
        engine.product_repo.get_by_id.return_value = None

        with pytest.raises(ConflictError, match=TASK_ALREADY_COMPLETED):
            await engine.submit(1, 3)

    @pytest.mark.asyncio
    async def test_missing_product(self, engine):
        engine.product_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match=PRODUCT_NOT_FOUND):
            await engine.submit(1, 3)

    @pytest.mark.asyncio
    async def test_unavailable_before_first_task_minimum(self, engine):
        engine.user_repo.get_for_update.return_value = _user(
            balance=Decimal("10"), completed_tasks=0
        )
        engine.product_repo.get_by_id.return_value = _product(is_active=False)

        with pytest.raises(InvalidStateError, match=PRODUCT_UNAVAILABLE):
            await engine.submit(1, 3)

    @pytest.mark.asyncio
    async def test_end_date_equal_to_now_is_unavailable(self, engine):
        engine.product_repo.get_by_id.return_value = _product(
            end_date=FIXED_NOW
        )

        with pytest.raises(InvalidStateError, match=PRODUCT_UNAVAILABLE):
            await engine.submit(1, 3)

    @pytest.mark.asyncio
    async def test_first_task_minimum(self, engine):
        engine.user_repo.get_for_update.return_value = _user(
            balance=Decimal("49.99"), completed_tasks=0
        )

        with pytest.raises(InvalidStateError, match=re.escape(MINIMUM_BALANCE_REQUIRED)):
            await engine.submit(1, 3)

    @pytest.mark.asyncio
    async def test_limit_checked_before_override(self, engine):
        engine.user_repo.get_for_update.return_value = _user(
            completed_tasks=33
        )

        with pytest.raises(LimitReachedError, match=UPGRADE_OR_WITHDRAW):
            await engine.submit(1, 3)

        engine.override_repo.find_override.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insufficient_funds_uses_override(self, engine):
        engine.user_repo.get_for_update.return_value = _user(
            balance=Decimal("15")
        )
        engine.override_repo.find_override.return_value = SimpleNamespace(
            negative_amount=Decimal("16")
        )

        with pytest.raises(
            InsufficientFundsError, match=INSUFFICIENT_TASK_BALANCE
        ) as exc_info:
            await engine.submit(1, 3)

        assert exc_info.value.details["required"] == "16"
        engine.submission_repo.create.assert_not_awaited()


class TestTaskLimitMessages:
    """Cap messages per level."""

    @pytest.mark.parametrize(
        "level,completed,message",
        [
            (1, 33, UPGRADE_OR_WITHDRAW),
            (1, 34, WITHDRAW_FIRST),
            (2, 38, WITHDRAW_FIRST),
            (2, 40, WITHDRAW_FIRST),
        ],
    )
    def test_messages(self, level, completed, message):
        user = _user(level=level, completed_tasks=completed)

        with pytest.raises(LimitReachedError) as exc_info:
            TaskSubmissionEngine._check_task_limit(user)

        assert exc_info.value.message == message

    @pytest.mark.parametrize("level,completed", [(1, 32), (2, 33), (2, 37)])
    def test_below_cap(self, level, completed):
        user = _user(level=level, completed_tasks=completed)

        TaskSubmissionEngine._check_task_limit(user)


class TestWrites:
    """Successful submission writes."""

    @pytest.mark.asyncio
    async def test_adjusts_balance_by_profit_minus_debit(
        self, engine, mock_session
    ):
        await engine.submit(1, 3)

        engine.balance_manager.adjust_balance.assert_awaited_once_with(
            1, Decimal("-19.25"), reason="task_submission"
        )
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_increments_completed_tasks(self, engine):
        user = _user(completed_tasks=5)
        engine.user_repo.get_for_update.return_value = user

        await engine.submit(1, 3)

        assert user.completed_tasks == 6

    @pytest.mark.asyncio
    async def test_bonus_per_referred_user(self, engine):
        engine.user_repo.find_referred_users.return_value = [
            SimpleNamespace(id=2),
            SimpleNamespace(id=3),
        ]

        await engine.submit(1, 3)

        assert engine.bonus_repo.create.await_count == 2
        engine.balance_manager.adjust_balance.assert_any_await(
            2, Decimal("0.1875"), reason="referral_bonus"
        )
        engine.balance_manager.adjust_balance.assert_any_await(
            3, Decimal("0.1875"), reason="referral_bonus"
        )

    @pytest.mark.asyncio
    async def test_integrity_error_reported_as_conflict(
        self, engine, mock_session
    ):
        engine.submission_repo.create.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed")
        )

        with pytest.raises(ConflictError, match=TASK_ALREADY_COMPLETED):
            await engine.submit(1, 3)

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()
