from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import FileResponse

from .backends.local import LocalBackend
from .base import FileNotFoundError, StorageBackend

logger = logging.getLogger(__name__)


def add_storage(
    app: FastAPI,
    backend: StorageBackend,
    *,
    serve_files: bool = True,
    file_route_prefix: str = "/uploads",
) -> StorageBackend:
    """Register ``backend`` as ``app.state.storage``.

    For a LocalBackend with ``serve_files`` a GET route is mounted under
    ``file_route_prefix`` that serves stored files, verifying URL signatures
    when the backend signs them. Other backends hand out their own URLs.
    """
    app.state.storage = backend

    if serve_files and isinstance(backend, LocalBackend):
        prefix = "/" + file_route_prefix.strip("/")

        @app.get(prefix + "/{key:path}", include_in_schema=False)
        async def serve_file(
            key: str,
            expires: Optional[str] = Query(None),
            signature: Optional[str] = Query(None),
            download: bool = Query(False),
        ) -> FileResponse:
            if backend.signing_secret and not backend.verify_url(
                key, expires or "", signature or "", download
            ):
                raise HTTPException(status_code=403, detail="Invalid or expired file URL")
            try:
                meta = await backend.get_metadata(key)
            except FileNotFoundError:
                raise HTTPException(status_code=404, detail="File not found")
            filename = key.rsplit("/", 1)[-1]
            return FileResponse(
                backend._get_file_path(key),
                media_type=meta.get("content_type"),
                filename=filename if download else None,
            )

        logger.debug("Serving local storage files under %s", prefix)

    return backend


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage  # type: ignore[attr-defined]


StorageDep = Annotated[StorageBackend, Depends(get_storage)]
