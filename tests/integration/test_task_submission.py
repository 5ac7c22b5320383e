"""
Integration tests for task submission against an in-memory database.

Tests cover:
- Precondition failures leave no trace
- Level caps and first-task minimum boundaries
- Debit overrides
- Referral bonus fan-out
- Atomic rollback on mid-transaction failure
"""

import asyncio
import re
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from app.models import ReferralBonus, TaskSubmission, User
from app.repositories.referral_bonus_repository import ReferralBonusRepository
from app.services.task import TaskService, TaskSubmissionEngine
from app.utils.exceptions import (
    MINIMUM_BALANCE_REQUIRED,
    NEGATIVE_BALANCE,
    PRODUCT_UNAVAILABLE,
    TASK_ALREADY_COMPLETED,
    UPGRADE_OR_WITHDRAW,
    WITHDRAW_FIRST,
    ConflictError,
    InsufficientFundsError,
    InvalidStateError,
    LimitReachedError,
    NotFoundError,
)


async def _count(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest.fixture
def engine(session, fixed_clock):
    """Submission engine with a fixed clock."""
    return TaskSubmissionEngine(session, clock=fixed_clock)


class TestSuccessfulSubmission:
    """Happy path."""

    @pytest.mark.asyncio
    async def test_updates_balance_and_counter(
        self, session, engine, make_user, make_product, reload
    ):
        user = await make_user(balance="100", completed_tasks=5)
        product = await make_product(negative_amount="20")

        submission = await engine.submit(user.id, product.id)

        assert submission.id is not None
        assert submission.created_at is not None
        assert submission.profit_earned == Decimal("0.75")
        assert submission.amount_debited == Decimal("20")

        stored = await reload(User, user.id)
        assert stored.balance == Decimal("80.75")
        assert stored.completed_tasks == 6

    @pytest.mark.asyncio
    async def test_premium_profit_rate(
        self, engine, make_user, make_product, reload
    ):
        user = await make_user(balance="200", level=2, completed_tasks=1)
        product = await make_product(negative_amount="5")

        submission = await engine.submit(user.id, product.id)

        assert submission.profit_earned == Decimal("2")
        assert (await reload(User, user.id)).balance == Decimal("197")

    @pytest.mark.asyncio
    async def test_task_service_submit_and_list(
        self, session, make_user, make_product
    ):
        user = await make_user(balance="500", completed_tasks=1)
        first = await make_product(name="First")
        second = await make_product(name="Second")
        service = TaskService(session)

        await service.submit_task(user.id, first.id)
        await service.submit_task(user.id, second.id)
        tasks = await service.get_user_tasks(user.id)

        assert [task.product.name for task in tasks] == ["Second", "First"]

    @pytest.mark.asyncio
    async def test_get_user_tasks_empty(self, session, make_user):
        user = await make_user()

        assert await TaskService(session).get_user_tasks(user.id) == []


class TestPreconditions:
    """Failures raise the right error and write nothing."""

    @pytest.mark.asyncio
    async def test_unknown_user(self, session, engine, make_product):
        product = await make_product()

        with pytest.raises(NotFoundError):
            await engine.submit(999, product.id)

        assert await _count(session, TaskSubmission) == 0

    @pytest.mark.asyncio
    async def test_unknown_product(self, engine, make_user):
        user = await make_user(completed_tasks=1)

        with pytest.raises(NotFoundError):
            await engine.submit(user.id, 999)

    @pytest.mark.asyncio
    async def test_negative_balance_regardless_of_product(
        self, engine, make_user
    ):
        user = await make_user(balance="-5")
        user_id = user.id

        with pytest.raises(InvalidStateError, match=NEGATIVE_BALANCE):
            await engine.submit(user_id, 999)

    @pytest.mark.asyncio
    async def test_duplicate_submission(
        self, session, engine, make_user, make_product, reload
    ):
        user = await make_user(balance="100", completed_tasks=1)
        product = await make_product(negative_amount="10")
        user_id, product_id = user.id, product.id
        await engine.submit(user_id, product_id)
        balance_after_first = (await reload(User, user_id)).balance

        with pytest.raises(ConflictError, match=TASK_ALREADY_COMPLETED):
            await engine.submit(user_id, product_id)

        stored = await reload(User, user_id)
        assert stored.balance == balance_after_first
        assert stored.completed_tasks == 2
        assert await _count(session, TaskSubmission) == 1

    @pytest.mark.asyncio
    async def test_inactive_product(self, engine, make_user, make_product):
        user = await make_user(completed_tasks=1)
        product = await make_product(is_active=False)

        with pytest.raises(InvalidStateError, match=PRODUCT_UNAVAILABLE):
            await engine.submit(user.id, product.id)

    @pytest.mark.asyncio
    async def test_product_ending_now_is_unavailable(
        self, engine, make_user, make_product, fixed_now
    ):
        user = await make_user(completed_tasks=1)
        product = await make_product(end_date=fixed_now)

        with pytest.raises(InvalidStateError, match=PRODUCT_UNAVAILABLE):
            await engine.submit(user.id, product.id)

    @pytest.mark.asyncio
    async def test_product_ending_after_now_is_available(
        self, engine, make_user, make_product, fixed_now
    ):
        user = await make_user(completed_tasks=1)
        product = await make_product(
            end_date=fixed_now + timedelta(seconds=1)
        )

        assert await engine.submit(user.id, product.id)

    @pytest.mark.asyncio
    async def test_failure_is_idempotent(
        self, session, engine, make_user, make_product, reload
    ):
        user = await make_user(balance="10", completed_tasks=3)
        product = await make_product(negative_amount="20")
        user_id, product_id = user.id, product.id

        for _ in range(2):
            with pytest.raises(InsufficientFundsError):
                await engine.submit(user_id, product_id)

        stored = await reload(User, user_id)
        assert stored.balance == Decimal("10")
        assert stored.completed_tasks == 3
        assert await _count(session, TaskSubmission) == 0


class TestFirstTaskMinimum:
    """Minimum balance before the first task."""

    @pytest.mark.asyncio
    async def test_below_minimum(self, engine, make_user, make_product):
        user = await make_user(balance="49.99", completed_tasks=0)
        product = await make_product(negative_amount="1")

        with pytest.raises(
            InvalidStateError, match=re.escape(MINIMUM_BALANCE_REQUIRED)
        ):
            await engine.submit(user.id, product.id)

    @pytest.mark.asyncio
    async def test_exact_minimum(self, engine, make_user, make_product, reload):
        user = await make_user(balance="50.00", completed_tasks=0)
        product = await make_product(negative_amount="1")

        await engine.submit(user.id, product.id)

        assert (await reload(User, user.id)).completed_tasks == 1

    @pytest.mark.asyncio
    async def test_minimum_ignored_after_first_task(
        self, engine, make_user, make_product
    ):
        user = await make_user(balance="10", completed_tasks=1)
        product = await make_product(negative_amount="1")

        assert await engine.submit(user.id, product.id)


class TestTaskCaps:
    """Level task caps."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "level,completed,message",
        [
            (1, 33, UPGRADE_OR_WITHDRAW),
            (1, 34, WITHDRAW_FIRST),
            (2, 38, WITHDRAW_FIRST),
        ],
    )
    async def test_cap_reached(
        self, engine, make_user, make_product, level, completed, message
    ):
        user = await make_user(
            balance="1000", level=level, completed_tasks=completed
        )
        product = await make_product()

        with pytest.raises(LimitReachedError) as exc_info:
            await engine.submit(user.id, product.id)

        assert exc_info.value.message == message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("level,completed", [(1, 32), (2, 37)])
    async def test_last_task_below_cap(
        self, engine, make_user, make_product, reload, level, completed
    ):
        user = await make_user(
            balance="1000", level=level, completed_tasks=completed
        )
        product = await make_product()

        await engine.submit(user.id, product.id)

        assert (await reload(User, user.id)).completed_tasks == completed + 1


class TestOverrides:
    """Per-user debit overrides."""

    @pytest.mark.asyncio
    async def test_override_replaces_product_default(
        self, engine, make_user, make_product, make_override, reload
    ):
        user = await make_user(balance="100", completed_tasks=1)
        product = await make_product(negative_amount="25")
        await make_override(user, product, "10")

        submission = await engine.submit(user.id, product.id)

        assert submission.amount_debited == Decimal("10")
        assert (await reload(User, user.id)).balance == Decimal("90.75")

    @pytest.mark.asyncio
    async def test_zero_override_debits_nothing(
        self, engine, make_user, make_product, make_override
    ):
        user = await make_user(balance="100", completed_tasks=1)
        product = await make_product(negative_amount="25")
        await make_override(user, product, "0")

        submission = await engine.submit(user.id, product.id)

        assert submission.amount_debited == 0

    @pytest.mark.asyncio
    async def test_override_of_other_user_ignored(
        self, engine, make_user, make_product, make_override
    ):
        user = await make_user(balance="100", completed_tasks=1)
        other = await make_user()
        product = await make_product(negative_amount="25")
        await make_override(other, product, "10")

        submission = await engine.submit(user.id, product.id)

        assert submission.amount_debited == Decimal("25")

    @pytest.mark.asyncio
    async def test_override_above_balance(
        self, engine, make_user, make_product, make_override
    ):
        user = await make_user(balance="100", completed_tasks=1)
        product = await make_product(negative_amount="5")
        await make_override(user, product, "150")

        with pytest.raises(InsufficientFundsError):
            await engine.submit(user.id, product.id)


class TestReferralBonuses:
    """Bonus fan-out to users referred by the submitter."""

    @pytest.mark.asyncio
    async def test_fan_out(
        self, session, engine, make_user, make_product, reload
    ):
        referrer_of_a = await make_user(balance="5")
        a = await make_user(
            balance="100", completed_tasks=5, referred_by=referrer_of_a
        )
        b = await make_user(balance="1", referred_by=a)
        c = await make_user(balance="2", referred_by=a)
        grandchild = await make_user(balance="3", referred_by=b)
        product = await make_product(negative_amount="20")

        submission = await engine.submit(a.id, product.id)

        stored_a = await reload(User, a.id)
        assert stored_a.balance == Decimal("80.75")
        assert stored_a.completed_tasks == 6
        assert (await reload(User, b.id)).balance == Decimal("1.1875")
        assert (await reload(User, c.id)).balance == Decimal("2.1875")
        # One level only, and nothing flows upward
        assert (await reload(User, grandchild.id)).balance == Decimal("3")
        assert (await reload(User, referrer_of_a.id)).balance == Decimal("5")

        bonuses = await ReferralBonusRepository(session).get_by_submission(
            submission.id
        )
        assert len(bonuses) == 2
        assert {bonus.referred_user_id for bonus in bonuses} == {b.id, c.id}
        assert all(bonus.referrer_id == a.id for bonus in bonuses)
        assert all(
            bonus.bonus_amount == Decimal("0.1875") for bonus in bonuses
        )

    @pytest.mark.asyncio
    async def test_no_referrals_no_bonuses(
        self, session, engine, make_user, make_product
    ):
        user = await make_user(completed_tasks=1)
        product = await make_product()

        await engine.submit(user.id, product.id)

        assert await _count(session, ReferralBonus) == 0


class TestAtomicity:
    """All-or-nothing writes."""

    @pytest.mark.asyncio
    async def test_failure_on_second_bonus_rolls_back_everything(
        self, session, engine, make_user, make_product, reload, monkeypatch
    ):
        a = await make_user(balance="100", completed_tasks=5)
        b = await make_user(balance="1", referred_by=a)
        c = await make_user(balance="2", referred_by=a)
        product = await make_product(negative_amount="20")
        a_id, b_id, c_id, product_id = a.id, b.id, c.id, product.id

        original_create = engine.bonus_repo.create
        calls = []

        async def failing_create(**data):
            calls.append(data)
            if len(calls) == 2:
                raise RuntimeError("storage failure")
            return await original_create(**data)

        monkeypatch.setattr(engine.bonus_repo, "create", failing_create)

        with pytest.raises(RuntimeError, match="storage failure"):
            await engine.submit(a_id, product_id)

        stored_a = await reload(User, a_id)
        assert stored_a.balance == Decimal("100")
        assert stored_a.completed_tasks == 5
        assert (await reload(User, b_id)).balance == Decimal("1")
        assert (await reload(User, c_id)).balance == Decimal("2")
        assert await _count(session, TaskSubmission) == 0
        assert await _count(session, ReferralBonus) == 0

    @pytest.mark.asyncio
    async def test_unique_violation_reported_as_conflict(
        self, session, engine, make_user, make_product, reload, monkeypatch
    ):
        user = await make_user(balance="100", completed_tasks=1)
        product = await make_product(negative_amount="10")
        user_id, product_id = user.id, product.id
        await engine.submit(user_id, product_id)
        balance_after_first = (await reload(User, user_id)).balance

        # Simulate a concurrent request that passed the existence check
        monkeypatch.setattr(
            engine.submission_repo,
            "exists_for",
            AsyncMock(return_value=False),
        )

        with pytest.raises(ConflictError, match=TASK_ALREADY_COMPLETED):
            await engine.submit(user_id, product_id)

        stored = await reload(User, user_id)
        assert stored.balance == balance_after_first
        assert stored.completed_tasks == 2
        assert await _count(session, TaskSubmission) == 1

    @pytest.mark.asyncio
    async def test_timeout_during_fan_out_leaves_no_writes(
        self, session, engine, make_user, make_product, reload, monkeypatch
    ):
        a = await make_user(balance="100", completed_tasks=5)
        b = await make_user(balance="1", referred_by=a)
        product = await make_product(negative_amount="20")
        a_id, b_id, product_id = a.id, b.id, product.id

        async def stalled_create(**data):
            await asyncio.sleep(10)

        monkeypatch.setattr(engine.bonus_repo, "create", stalled_create)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(engine.submit(a_id, product_id), 0.2)

        # Anything still pending in the session would be written here
        await session.commit()

        stored_a = await reload(User, a_id)
        assert stored_a.balance == Decimal("100")
        assert stored_a.completed_tasks == 5
        assert (await reload(User, b_id)).balance == Decimal("1")
        assert await _count(session, TaskSubmission) == 0
        assert await _count(session, ReferralBonus) == 0
