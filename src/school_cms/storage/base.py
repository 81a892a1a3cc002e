"""Storage backend contract.

A backend maps opaque keys to blobs. Keys are relative, slash-separated
paths (``news/1700000000000-1a2b3c4d-photo.png``); the attachment manager
stores them in the database as the record's attachment reference, so every
backend must accept back exactly the keys it was given.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Protocol, runtime_checkable

from school_cms.exceptions import SchoolCmsError

MAX_KEY_LENGTH = 1024
_UNSAFE_KEY_CHARS = re.compile(r'[<>:"|?*\\\x00-\x1f]')


class StorageError(SchoolCmsError):
    """Base error for storage backend failures."""

    status_code = 502


class FileNotFoundError(StorageError):  # noqa: A001 - mirrors the builtin on purpose
    """No blob is stored under the requested key."""

    status_code = 404


class InvalidKeyError(StorageError):
    """The key is empty, absolute, too long or contains unsafe segments."""

    status_code = 400


class PermissionDeniedError(StorageError):
    """The backend refused the operation (credentials, bucket policy)."""

    status_code = 403


class QuotaExceededError(StorageError):
    """The backend is out of space for this blob."""

    status_code = 413


def validate_key(key: str) -> None:
    if not key:
        raise InvalidKeyError("Storage key must not be empty")
    if len(key) > MAX_KEY_LENGTH:
        raise InvalidKeyError(f"Storage key exceeds {MAX_KEY_LENGTH} characters")
    if key.startswith("/"):
        raise InvalidKeyError(f"Storage key must be relative: {key!r}")
    if any(part in ("..", ".") for part in key.split("/")):
        raise InvalidKeyError(f"Storage key must not contain path traversal: {key!r}")
    if _UNSAFE_KEY_CHARS.search(key):
        raise InvalidKeyError(f"Storage key contains unsafe characters: {key!r}")


@runtime_checkable
class StorageBackend(Protocol):
    """Async key/blob store shared by every backend implementation."""

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> str:
        """Store ``data`` under ``key`` (overwriting) and return a URL for it."""
        ...

    async def get(self, key: str) -> bytes:
        """Return the blob's bytes; raise FileNotFoundError if absent."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove the blob. Returns False when it was already absent."""
        ...

    async def exists(self, key: str) -> bool: ...

    async def get_url(self, key: str, expires_in: int = 3600, download: bool = False) -> str:
        """Client-usable URL; raise FileNotFoundError if absent."""
        ...

    async def get_metadata(self, key: str) -> dict[str, Any]: ...

    async def list_keys(self, prefix: str = "", limit: int = 1000) -> list[str]: ...


__all__ = [
    "StorageBackend",
    "StorageError",
    "FileNotFoundError",
    "InvalidKeyError",
    "PermissionDeniedError",
    "QuotaExceededError",
    "validate_key",
    "MAX_KEY_LENGTH",
]
