from typing import Annotated

from fastapi import Depends, Request

from .errors import StorageDeleteError, StorageWriteError
from .manager import AttachmentManager, AttachmentResolution
from .uploads import Upload, make_key, sanitize_filename


def get_attachments(request: Request) -> AttachmentManager:
    return request.app.state.attachments  # type: ignore[attr-defined]


AttachmentsDep = Annotated[AttachmentManager, Depends(get_attachments)]

__all__ = [
    "AttachmentManager",
    "AttachmentResolution",
    "AttachmentsDep",
    "StorageDeleteError",
    "StorageWriteError",
    "Upload",
    "get_attachments",
    "make_key",
    "sanitize_filename",
]
