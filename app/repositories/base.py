"""
Base repository.

Shared query helpers for the per-model repositories. Nothing here
commits; writes are flushed so the owning service decides when the
unit of work ends.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository bound to one model and one session.

    Subclasses pass their model up and add the queries that are
    specific to it:

        class DepositRepository(BaseRepository[Deposit]):
            def __init__(self, session: AsyncSession):
                super().__init__(Deposit, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        self.model = model
        self.session = session

    def _select(self, **filters: Any) -> Select:
        stmt = select(self.model)
        if filters:
            stmt = stmt.filter_by(**filters)
        return stmt

    async def get_by_id(self, id: int) -> ModelType | None:
        """Return the row with this primary key, from the identity map if loaded."""
        return await self.session.get(self.model, id)

    async def get_for_update(self, id: int) -> ModelType | None:
        """
        Load a row with SELECT ... FOR UPDATE.

        The lock is held until the surrounding transaction commits or
        rolls back. Attributes are refreshed from the locked row even
        when the object is already in the session.

        Args:
            id: Primary key

        Returns:
            Locked entity or None
        """
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def get_by(self, **filters: Any) -> ModelType | None:
        """Return the single row matching the column filters, or None."""
        result = await self.session.execute(self._select(**filters))
        return result.scalar_one_or_none()

    async def create(self, **data: Any) -> ModelType:
        """
        Insert a row and load server-generated columns.

        Args:
            **data: Column values

        Returns:
            The flushed entity with id and defaults populated
        """
        entity = self.model(**data)
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def update(self, id: int, **data: Any) -> ModelType | None:
        """Assign column values on an existing row; None if it does not exist."""
        entity = await self.get_by_id(id)
        if entity is None:
            return None

        for column, value in data.items():
            setattr(entity, column, value)
        await self.session.flush()
        return entity

    async def count(self, **filters: Any) -> int:
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = stmt.filter_by(**filters)
        return (await self.session.execute(stmt)).scalar_one()

    async def exists(self, **filters: Any) -> bool:
        stmt = select(self._select(**filters).exists())
        return bool((await self.session.execute(stmt)).scalar())
