from __future__ import annotations

import mimetypes
import re
import time
import uuid
from dataclasses import dataclass
from typing import Optional

from starlette.datastructures import UploadFile

from .errors import upload_too_large

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
MAX_FILENAME_CHARS = 120


@dataclass(frozen=True)
class Upload:
    """One inbound file, already read into memory."""

    filename: str
    data: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    async def from_upload_file(cls, file: UploadFile, *, max_bytes: Optional[int] = None) -> "Upload":
        """Read ``file`` into memory, never holding more than ``max_bytes + 1`` bytes.

        ``UploadFile.size`` is unknown for chunked bodies, so the read itself is
        capped as well.
        """
        filename = file.filename or "upload"
        if max_bytes is None:
            data = await file.read()
        else:
            if file.size is not None and file.size > max_bytes:
                raise upload_too_large(filename, file.size, max_bytes)
            data = await file.read(max_bytes + 1)
            if len(data) > max_bytes:
                raise upload_too_large(filename, len(data), max_bytes)
        content_type = file.content_type or guess_content_type(filename)
        return cls(filename=filename, data=data, content_type=content_type)


def guess_content_type(filename: str) -> str:
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"


def sanitize_filename(filename: str) -> str:
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_FILENAME_CHARS.sub("_", name).strip("._") or "upload"
    return name[-MAX_FILENAME_CHARS:]


def make_key(prefix: str, filename: str) -> str:
    """``<prefix>/<epoch ms>-<8 hex>-<safe filename>``; unique per call."""
    stem = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{sanitize_filename(filename)}"
    prefix = prefix.strip("/")
    return f"{prefix}/{stem}" if prefix else stem
