from __future__ import annotations

from typing import Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from .engine import DBEngine
from .repository import Repository

T = TypeVar("T")


class UnitOfWork:
    """One session per request: commit on clean exit, rollback on error.

    Handlers may ``await uow.commit()`` early when a later step (such as
    deleting a superseded blob) must only run once the row change is durable.
    """

    def __init__(self, engine: DBEngine, *, commit_on_success: bool = True):
        self._engine = engine
        self._commit_on_success = commit_on_success
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> "UnitOfWork":
        self.session = self._engine.session_factory()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        assert self.session is not None
        try:
            if exc_type is None and self._commit_on_success:
                await self.session.commit()
            else:
                await self.session.rollback()
        finally:
            await self.session.close()

    def repo(self, model: Type[T]) -> Repository[T]:
        assert self.session is not None
        return Repository[T](self.session, model)

    async def commit(self) -> None:
        assert self.session is not None
        await self.session.commit()
