from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.routing import APIRouter
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from .engine import DBEngine
from .settings import DBSettings, get_db_settings
from .uow import UnitOfWork

logger = logging.getLogger(__name__)


def attach_db(app: FastAPI, settings: DBSettings | None = None) -> DBEngine:
    """Create the engine and bind its lifetime to the app's lifespan.

    The engine is exposed as ``app.state.db_engine``; when
    ``settings.create_all`` is set, missing tables are created on startup.
    """
    settings = settings or get_db_settings()
    engine = DBEngine(settings)
    app.state.db_engine = engine  # type: ignore[attr-defined]

    existing = getattr(app.router, "lifespan_context", None)  # type: ignore[attr-defined]

    @asynccontextmanager
    async def composed_lifespan(_app: FastAPI):
        try:
            logger.info(
                "DB attached: url=%s create_all=%s",
                engine.engine.url.render_as_string(hide_password=True),
                settings.create_all,
            )
            if settings.create_all:
                await engine.create_all()
            if existing:
                async with existing(_app):  # type: ignore[misc]
                    yield
            else:
                yield
        finally:
            await engine.dispose()

    app.router.lifespan_context = composed_lifespan  # type: ignore[attr-defined]
    return engine


def get_engine(request: Request) -> DBEngine:
    return request.app.state.db_engine  # type: ignore[attr-defined]


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    engine: DBEngine = get_engine(request)
    async with engine.session() as s:
        yield s


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    engine: DBEngine = get_engine(request)
    async with UnitOfWork(engine) as uow:
        yield uow


EngineDep = Annotated[DBEngine, Depends(get_engine)]
SessionDep = Annotated[AsyncSession, Depends(get_session)]
UoWDep = Annotated[UnitOfWork, Depends(get_uow)]


async def db_healthcheck(session: AsyncSession) -> bool:
    try:
        await session.execute(text("select 1"))
        return True
    except Exception:
        logger.warning("DB health check failed", exc_info=True)
        return False


health_router = APIRouter(tags=["internal"])


@health_router.get("/_db/health", include_in_schema=False)
async def db_health(session: SessionDep) -> Response:
    ok = await db_healthcheck(session)
    return Response(
        status_code=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE
    )
