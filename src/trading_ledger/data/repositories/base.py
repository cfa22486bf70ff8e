"""Session plumbing shared by the ledger and profile repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from trading_ledger.data.models import Base

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Repository bound to one session and one mapped class.

    Writes are flushed straight away so generated ids (ledger entry ids) are readable
    before the caller commits. Committing is left to the caller, which owns the unit of
    work.
    """

    model: type[T]

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, pk: Any) -> T | None:
        """Look up a row by primary key."""
        return await self._session.get(self.model, pk)

    async def add(self, entity: T) -> T:
        """Stage a new row and flush it."""
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def delete(self, entity: T) -> None:
        """Remove a row and flush the delete."""
        await self._session.delete(entity)
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def _scalars(self, stmt: Select[tuple[T]]) -> Sequence[T]:
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def _count(self, stmt: Select[tuple[int]]) -> int:
        result = await self._session.execute(stmt)
        return int(result.scalar_one())
