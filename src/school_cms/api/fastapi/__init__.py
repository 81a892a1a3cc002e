from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from school_cms.app.core.logging import setup_logging
from school_cms.app.settings import AppSettings, get_app_settings
from school_cms.attachments import AttachmentManager
from school_cms.auth import AuthSettings, get_auth_settings, require_admin
from school_cms.auth import router as auth_router
from school_cms.content.resources import RESOURCES
from school_cms.db import DBSettings, attach_db, health_router
from school_cms.storage import StorageBackend, StorageSettings, add_storage, easy_storage

from .crud_router import make_crud_router
from .middleware import CatchAllExceptionMiddleware, RequestSizeLimitMiddleware, register_error_handlers

logger = logging.getLogger(__name__)


def create_app(
    *,
    app_settings: Optional[AppSettings] = None,
    db_settings: Optional[DBSettings] = None,
    storage: Optional[StorageBackend] = None,
    storage_settings: Optional[StorageSettings] = None,
    auth_settings: Optional[AuthSettings] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Assemble the school CMS API.

    Every collaborator can be injected; anything omitted is built from the
    environment (``APP_*``, ``DB_*``, ``STORAGE_*``, ``AUTH_*``).
    """
    app_settings = app_settings or get_app_settings()
    storage_settings = storage_settings or StorageSettings()
    auth_settings = auth_settings or get_auth_settings()
    if configure_logging:
        setup_logging(app_settings)

    app = FastAPI(title=app_settings.name, version=app_settings.version)
    app.state.app_settings = app_settings
    app.state.auth_settings = auth_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials="*" not in app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Attachment-Warning"],
    )
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=app_settings.max_request_bytes)
    app.add_middleware(CatchAllExceptionMiddleware)
    register_error_handlers(app)

    attach_db(app, db_settings)
    storage = add_storage(app, storage or easy_storage(settings=storage_settings), file_route_prefix="/uploads")
    app.state.attachments = AttachmentManager(storage, max_upload_bytes=storage_settings.max_upload_bytes)

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        return "Backend server is running"

    app.include_router(health_router)
    app.include_router(auth_router)

    write_dependencies = [Depends(require_admin)] if auth_settings.protect_writes else []
    for resource in RESOURCES:
        app.include_router(make_crud_router(resource, write_dependencies=write_dependencies))

    logger.info(
        "%s %s initialized [env: %s, storage: %s, protected writes: %s]",
        app_settings.name,
        app_settings.version,
        app_settings.env,
        type(storage).__name__,
        auth_settings.protect_writes,
    )
    return app


__all__ = ["create_app"]
