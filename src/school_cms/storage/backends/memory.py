from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Optional

from ..base import FileNotFoundError, QuotaExceededError, validate_key


class MemoryBackend:
    """In-process blob store for tests and throwaway dev runs.

    Data is lost on restart. ``max_size`` (bytes) caps the total stored
    payload; replacing a blob only counts the size difference.
    """

    def __init__(self, max_size: Optional[int] = None):
        self.max_size = max_size
        self._files: dict[str, bytes] = {}
        self._metadata: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    def _total_size(self) -> int:
        return sum(len(v) for v in self._files.values())

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> str:
        validate_key(key)
        async with self._lock:
            if self.max_size is not None:
                current = len(self._files.get(key, b""))
                projected = self._total_size() - current + len(data)
                if projected > self.max_size:
                    raise QuotaExceededError(
                        f"Storage quota exceeded: {projected} > {self.max_size} bytes"
                    )
            self._files[key] = bytes(data)
            self._metadata[key] = {
                **(metadata or {}),
                "size": len(data),
                "content_type": content_type,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        return f"memory://{key}"

    async def get(self, key: str) -> bytes:
        validate_key(key)
        try:
            return self._files[key]
        except KeyError:
            raise FileNotFoundError(f"File not found: {key}") from None

    async def delete(self, key: str) -> bool:
        validate_key(key)
        async with self._lock:
            self._metadata.pop(key, None)
            return self._files.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        validate_key(key)
        return key in self._files

    async def get_url(self, key: str, expires_in: int = 3600, download: bool = False) -> str:
        if not await self.exists(key):
            raise FileNotFoundError(f"File not found: {key}")
        url = f"memory://{key}"
        return f"{url}?download=true" if download else url

    async def get_metadata(self, key: str) -> dict[str, Any]:
        validate_key(key)
        try:
            return dict(self._metadata[key])
        except KeyError:
            raise FileNotFoundError(f"File not found: {key}") from None

    async def list_keys(self, prefix: str = "", limit: int = 1000) -> list[str]:
        keys = sorted(k for k in self._files if k.startswith(prefix))
        return keys[:limit]

    async def clear(self) -> None:
        async with self._lock:
            self._files.clear()
            self._metadata.clear()

    def get_stats(self) -> dict[str, Any]:
        return {
            "file_count": len(self._files),
            "total_size": self._total_size(),
            "max_size": self.max_size,
        }
