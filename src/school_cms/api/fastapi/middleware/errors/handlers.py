from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from school_cms.exceptions import SchoolCmsError

logger = logging.getLogger(__name__)


def _log_context(request: Request, status_code: int) -> dict:
    return {"http_method": request.method, "path": request.url.path, "status_code": status_code}


def register_error_handlers(app: FastAPI) -> None:
    """Translate domain and HTTP errors into ``{"error": ...}`` JSON bodies.

    Request validation keeps FastAPI's default 422 shape; anything not handled
    here falls through to ``CatchAllExceptionMiddleware``.
    """

    @app.exception_handler(SchoolCmsError)
    async def handle_domain_error(request: Request, exc: SchoolCmsError) -> JSONResponse:
        status_code = exc.status_code
        level = logging.WARNING if status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s on %s %s (%d): %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            status_code,
            exc.message,
            extra=_log_context(request, status_code),
        )
        return JSONResponse(status_code=status_code, content={"error": exc.message or type(exc).__name__})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )
