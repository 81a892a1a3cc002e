import pytest
import pytest_asyncio

from school_cms.content.models import ContactMessage, News
from school_cms.db import DBEngine, DBSettings, UnitOfWork


@pytest_asyncio.fixture
async def engine():
    engine = DBEngine(DBSettings(database_url="sqlite+aiosqlite:///:memory:"))
    await engine.create_all()
    yield engine
    await engine.dispose()


def _news(title):
    from datetime import datetime

    return {"title": title, "published_at": datetime(2025, 1, 8)}


@pytest.mark.asyncio
class TestRepository:
    async def test_create_get_update_delete(self, engine):
        async with UnitOfWork(engine) as uow:
            repo = uow.repo(News)
            row = await repo.create(**_news("first"))
            assert row.id == 1

            updated = await repo.update(row.id, title="changed")
            assert updated.title == "changed"
            assert await repo.update(99, title="x") is None

            assert await repo.delete(row.id) == 1
            assert await repo.delete(row.id) == 0
            assert await repo.get(row.id) is None

    async def test_list_first_and_count(self, engine):
        async with UnitOfWork(engine) as uow:
            repo = uow.repo(News)
            for title in ("a", "b", "c"):
                await repo.create(**_news(title))

            assert [r.title for r in await repo.list()] == ["a", "b", "c"]
            assert [r.title for r in await repo.list(limit=2, offset=1)] == ["b", "c"]
            assert [r.title for r in await repo.list(where={"title": "b"})] == ["b"]
            assert (await repo.first()).title == "a"
            assert await repo.count() == 3

    async def test_python_side_defaults(self, engine):
        async with UnitOfWork(engine) as uow:
            row = await uow.repo(ContactMessage).create(name="Rina", email="rina@example.com", message="Halo")
            assert row.created_at is not None


@pytest.mark.asyncio
class TestUnitOfWork:
    async def test_commits_on_success(self, engine):
        async with UnitOfWork(engine) as uow:
            await uow.repo(News).create(**_news("kept"))

        async with UnitOfWork(engine) as uow:
            assert await uow.repo(News).count() == 1

    async def test_rolls_back_on_error(self, engine):
        with pytest.raises(RuntimeError):
            async with UnitOfWork(engine) as uow:
                await uow.repo(News).create(**_news("lost"))
                raise RuntimeError("boom")

        async with UnitOfWork(engine) as uow:
            assert await uow.repo(News).count() == 0

    async def test_early_commit_survives_later_error(self, engine):
        with pytest.raises(RuntimeError):
            async with UnitOfWork(engine) as uow:
                await uow.repo(News).create(**_news("durable"))
                await uow.commit()
                raise RuntimeError("after commit")

        async with UnitOfWork(engine) as uow:
            assert await uow.repo(News).count() == 1
