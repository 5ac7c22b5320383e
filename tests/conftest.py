"""Pytest configuration and shared fixtures for all tests."""

import os
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from itertools import count
from typing import Any
from unittest.mock import AsyncMock, MagicMock

# Minimal environment for Settings; must be set before app imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.models import Base, Product, User, UserTaskOverride


# Fixed instant used by tests that control the clock
FIXED_NOW = datetime(2026, 3, 15, 12, 0, 0, tzinfo=UTC)

_sequence = count(1)


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


@pytest.fixture
async def db_engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(db_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Database session configured like the app's session maker."""
    maker = async_sessionmaker(
        bind=db_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with maker() as db_session:
        yield db_session


@pytest.fixture
def fixed_now() -> datetime:
    """Instant returned by fixed_clock."""
    return FIXED_NOW


@pytest.fixture
def fixed_clock(fixed_now: datetime):
    """Clock returning fixed_now."""
    return lambda: fixed_now


@pytest.fixture
def make_user(session: AsyncSession):
    """Factory creating committed users."""

    async def _make_user(
        balance: Decimal | str = "100",
        level: int = 1,
        completed_tasks: int = 0,
        referred_by: User | None = None,
        **fields: Any,
    ) -> User:
        n = next(_sequence)
        user = User(
            username=fields.pop("username", f"user{n}"),
            email=fields.pop("email", f"user{n}@example.com"),
            referral_code=fields.pop("referral_code", f"{n:07X}"),
            balance=Decimal(balance),
            level=level,
            completed_tasks=completed_tasks,
            referred_by_id=referred_by.id if referred_by else None,
            **fields,
        )
        session.add(user)
        await session.commit()
        return user

    return _make_user


@pytest.fixture
def make_product(session: AsyncSession):
    """Factory creating committed products, claimable by default."""

    async def _make_product(
        negative_amount: Decimal | str = "20",
        price: Decimal | str = "100",
        end_date: datetime | None = None,
        is_active: bool = True,
        name: str | None = None,
    ) -> Product:
        product = Product(
            name=name or f"Product {next(_sequence)}",
            price=Decimal(price),
            negative_amount=Decimal(negative_amount),
            end_date=end_date or datetime.now(UTC) + timedelta(days=365),
            is_active=is_active,
        )
        session.add(product)
        await session.commit()
        return product

    return _make_product


@pytest.fixture
def make_override(session: AsyncSession):
    """Factory creating committed task overrides."""

    async def _make_override(
        user: User, product: Product, negative_amount: Decimal | str
    ) -> UserTaskOverride:
        override = UserTaskOverride(
            user_id=user.id,
            product_id=product.id,
            negative_amount=Decimal(negative_amount),
        )
        session.add(override)
        await session.commit()
        return override

    return _make_override


@pytest.fixture
def reload(session: AsyncSession):
    """Re-read an entity from the database, bypassing the identity map."""

    async def _reload(model: type, entity_id: int):
        return await session.get(model, entity_id, populate_existing=True)

    return _reload
