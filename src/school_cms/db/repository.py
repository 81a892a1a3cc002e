from __future__ import annotations

from typing import Any, Generic, Optional, Sequence, Type, TypeVar, cast

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class Repository(Generic[T]):
    """Generic async repository over one table addressed by integer ``id``.

    Every write touches exactly one row and only flushes; committing is the
    caller's (usually the UnitOfWork's) job.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        self.session = session
        self.model = model

    def _where(self, stmt, where: Optional[dict[str, Any]]):
        if not where:
            return stmt
        return stmt.where(and_(*[(cast(Any, getattr(self.model, k)) == v) for k, v in where.items()]))

    async def get(self, id: int) -> Optional[T]:
        return await self.session.get(self.model, id)

    async def first(self) -> Optional[T]:
        stmt = select(self.model).order_by(cast(Any, self.model).id).limit(1)
        return (await self.session.execute(stmt)).scalars().first()

    async def list(
        self,
        *,
        where: Optional[dict[str, Any]] = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Sequence[T]:
        stmt = self._where(select(self.model), where).order_by(cast(Any, self.model).id)
        if limit:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        return (await self.session.execute(stmt)).scalars().all()

    async def count(self, where: Optional[dict[str, Any]] = None) -> int:
        stmt = self._where(select(func.count()).select_from(self.model), where)
        return int((await self.session.execute(stmt)).scalar_one())

    async def create(self, **data) -> T:
        obj = self.model(**data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def update(self, id: int, **data) -> Optional[T]:
        obj = await self.get(id)
        if obj is None:
            return None
        for k, v in data.items():
            setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def delete(self, id: int) -> int:
        cond = cast(Any, self.model).id == id
        res = await self.session.execute(delete(self.model).where(cond))
        return int(res.rowcount or 0)
