# Public DB API exports
from .base import Base, IntIdMixin
from .engine import DBEngine
from .integration import (
    EngineDep,
    SessionDep,
    UoWDep,
    attach_db,
    db_healthcheck,
    get_engine,
    get_session,
    get_uow,
    health_router,
)
from .repository import Repository
from .settings import DBSettings, get_db_settings
from .uow import UnitOfWork

__all__ = [
    "DBSettings",
    "get_db_settings",
    "DBEngine",
    "Base",
    "IntIdMixin",
    "Repository",
    "UnitOfWork",
    "attach_db",
    "db_healthcheck",
    "health_router",
    "get_engine",
    "get_session",
    "get_uow",
    "EngineDep",
    "SessionDep",
    "UoWDep",
]
