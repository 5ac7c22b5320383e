"""
Base service class.

Provides common functionality for all service classes including session
management, logging and the transaction runner every write path goes through.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.exceptions import AppError


# Type variable for generic decorator return types
T = TypeVar("T")


class TransactionRunner:
    """
    Runs a coroutine as one all-or-nothing unit of work.

    Commits when the coroutine returns. Rolls back on any exception,
    cancellation included, and re-raises it unchanged so no flushed
    writes are left pending in the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize transaction runner.

        Args:
            session: Async database session
        """
        self.session = session

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Execute fn inside the session transaction.

        Args:
            fn: Zero-argument coroutine function doing the reads and writes

        Returns:
            Whatever fn returns, after a successful commit
        """
        try:
            result = await fn()
            await self.session.commit()
            return result
        except BaseException:
            await self.session.rollback()
            raise


class BaseService:
    """
    Base service class.

    Provides common functionality for all service classes:
    - Session management
    - Logging with bound service context
    - Transaction runner
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize base service.

        Args:
            session: Async database session
        """
        self.session = session
        self.runner = TransactionRunner(session)
        self.logger = logger.bind(service=self.__class__.__name__)


def transaction(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Decorator to wrap method in transaction with automatic commit/rollback.

    Business errors (AppError) are logged as warnings, anything else as
    errors with traceback. Both are re-raised.

    Usage:
        @transaction
        async def my_service_method(self, ...):
            # Your code here
            pass

    Args:
        func: Async method to wrap

    Returns:
        Wrapped async method
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> T:
        try:
            return await self.runner.run(
                lambda: func(self, *args, **kwargs)
            )
        except AppError as e:
            self.logger.warning(
                f"{func.__name__} rejected: {e.message}",
                extra={"function": func.__name__, "code": e.code, **e.details},
            )
            raise
        except Exception as e:
            self.logger.opt(exception=True).error(
                f"Transaction failed in {func.__name__}",
                extra={"function": func.__name__, "error": str(e)},
            )
            raise

    return wrapper
