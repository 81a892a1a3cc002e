"""
Root conftest.py for school-cms tests.

Provides:
1. Marker registration
2. Storage fixtures (in-memory, failure-injecting)
3. App/client fixtures wired to in-memory SQLite and MemoryBackend
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

import pytest
from fastapi.testclient import TestClient

from school_cms.api.fastapi import create_app
from school_cms.app.settings import AppSettings
from school_cms.auth.settings import AuthSettings
from school_cms.db import DBSettings, UnitOfWork
from school_cms.storage import MemoryBackend, StorageSettings

IN_MEMORY_DB = "sqlite+aiosqlite:///:memory:"


def pytest_configure(config):
    for name, desc in [
        ("storage", "Storage backend tests"),
        ("attachments", "Attachment lifecycle tests"),
        ("api", "HTTP API tests"),
        ("auth", "Admin login and token tests"),
    ]:
        config.addinivalue_line("markers", f"{name}: {desc}")


# =============================================================================
# STORAGE
# =============================================================================


class FlakyBackend(MemoryBackend):
    """MemoryBackend whose put/delete can be made to raise on demand."""

    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)
        self.fail_put: Optional[Exception] = None
        self.fail_delete: Optional[Exception] = None

    async def put(self, key, data, content_type, metadata=None):
        if self.fail_put is not None:
            raise self.fail_put
        return await super().put(key, data, content_type, metadata)

    async def delete(self, key):
        if self.fail_delete is not None:
            raise self.fail_delete
        return await super().delete(key)


@pytest.fixture
def storage() -> FlakyBackend:
    return FlakyBackend()


# =============================================================================
# APP / CLIENT
# =============================================================================


@pytest.fixture
def make_app(storage):
    """Factory for a fully wired app; keyword arguments override the defaults."""

    def _make(**overrides: Any):
        kwargs: dict[str, Any] = {
            "app_settings": AppSettings(env="test"),
            "db_settings": DBSettings(database_url=IN_MEMORY_DB, create_all=True),
            "storage": storage,
            "storage_settings": StorageSettings(backend="memory"),
            "auth_settings": AuthSettings(jwt_secret="test-jwt-secret-0123456789abcdef0123"),
            "configure_logging": False,
        }
        kwargs.update(overrides)
        return create_app(**kwargs)

    return _make


@pytest.fixture
def client(make_app):
    with TestClient(make_app()) as c:
        yield c


@pytest.fixture
def run_db():
    """Run ``fn(uow)`` on the client's event loop inside a committing UnitOfWork."""

    def _run(client: TestClient, fn: Callable[[UnitOfWork], Awaitable[Any]]) -> Any:
        async def _go():
            async with UnitOfWork(client.app.state.db_engine) as uow:
                return await fn(uow)

        return client.portal.call(_go)

    return _run
