from __future__ import annotations

import builtins
import hashlib
import hmac
import json
import logging
import mimetypes
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
from urllib.parse import quote, urlencode

import aiofiles
import aiofiles.os

from ..base import FileNotFoundError, InvalidKeyError, StorageError, validate_key

logger = logging.getLogger(__name__)

META_SUFFIX = ".meta.json"


class LocalBackend:
    """Blob store on the local filesystem, served over HTTP by ``add_storage``.

    URLs are ``{base_url}/{key}``. With a ``signing_secret`` they carry an
    HMAC signature and expiry that the file route verifies; without one the
    files are public, which is what a school website's images want.
    """

    def __init__(
        self,
        base_path: str | Path = "uploads",
        base_url: str = "/uploads",
        signing_secret: Optional[str] = None,
    ):
        self.base_path = Path(base_path)
        self.base_url = base_url.rstrip("/")
        self.signing_secret = signing_secret
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, key: str) -> Path:
        validate_key(key)
        path = (self.base_path / key).resolve()
        if not path.is_relative_to(self.base_path.resolve()):
            raise InvalidKeyError(f"Storage key escapes base path: {key!r}")
        return path

    def _get_metadata_path(self, key: str) -> Path:
        path = self._get_file_path(key)
        return path.with_name(path.name + META_SUFFIX)

    def _sign(self, key: str, expires: int, download: bool) -> str:
        assert self.signing_secret is not None
        message = f"{key}:{expires}:{download}".encode()
        return hmac.new(self.signing_secret.encode(), message, hashlib.sha256).hexdigest()

    def _build_url(self, key: str, expires_in: int, download: bool) -> str:
        url = f"{self.base_url}/{quote(key)}"
        params: dict[str, Any] = {}
        if self.signing_secret:
            expires = int(time.time()) + expires_in
            params["expires"] = expires
            params["signature"] = self._sign(key, expires, download)
        if download:
            params["download"] = "true"
        return f"{url}?{urlencode(params)}" if params else url

    def verify_url(self, key: str, expires: str, signature: str, download: bool = False) -> bool:
        """Check a signature produced by ``get_url``; unsigned backends accept everything."""
        if not self.signing_secret:
            return True
        try:
            expires_at = int(expires)
        except (TypeError, ValueError):
            return False
        if expires_at < int(time.time()):
            return False
        expected = self._sign(key, expires_at, download)
        return hmac.compare_digest(expected, signature or "")

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> str:
        file_path = self._get_file_path(key)
        temp_path = file_path.with_suffix(f"{file_path.suffix}.tmp")
        try:
            await aiofiles.os.makedirs(file_path.parent, exist_ok=True)
            async with aiofiles.open(temp_path, "wb") as fh:
                await fh.write(data)
            await aiofiles.os.replace(temp_path, file_path)

            meta = {
                **(metadata or {}),
                "size": len(data),
                "content_type": content_type,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            async with aiofiles.open(self._get_metadata_path(key), "w") as fh:
                await fh.write(json.dumps(meta))
        except OSError as exc:
            try:
                await aiofiles.os.remove(temp_path)
            except builtins.FileNotFoundError:
                pass
            except OSError:
                logger.warning("Could not remove temp file %s", temp_path, exc_info=True)
            raise StorageError(f"Failed to write {key}: {exc}") from exc
        logger.debug("Stored %s (%d bytes) at %s", key, len(data), file_path)
        return self._build_url(key, 3600, False)

    async def get(self, key: str) -> bytes:
        file_path = self._get_file_path(key)
        try:
            async with aiofiles.open(file_path, "rb") as fh:
                return await fh.read()
        except builtins.FileNotFoundError:
            raise FileNotFoundError(f"File not found: {key}") from None
        except OSError as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc

    async def delete(self, key: str) -> bool:
        file_path = self._get_file_path(key)
        try:
            await aiofiles.os.remove(file_path)
        except builtins.FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"Failed to delete {key}: {exc}") from exc
        try:
            await aiofiles.os.remove(self._get_metadata_path(key))
        except builtins.FileNotFoundError:
            pass
        return True

    async def exists(self, key: str) -> bool:
        return self._get_file_path(key).is_file()

    async def get_url(self, key: str, expires_in: int = 3600, download: bool = False) -> str:
        if not await self.exists(key):
            raise FileNotFoundError(f"File not found: {key}")
        return self._build_url(key, expires_in, download)

    async def get_metadata(self, key: str) -> dict[str, Any]:
        file_path = self._get_file_path(key)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {key}")
        meta_path = self._get_metadata_path(key)
        try:
            async with aiofiles.open(meta_path, "r") as fh:
                return json.loads(await fh.read())
        except builtins.FileNotFoundError:
            # file dropped in by hand, no sidecar
            stat = file_path.stat()
            return {
                "size": stat.st_size,
                "content_type": mimetypes.guess_type(file_path.name)[0] or "application/octet-stream",
                "created_at": datetime.fromtimestamp(stat.st_mtime, timezone.utc).isoformat(),
            }

    async def list_keys(self, prefix: str = "", limit: int = 1000) -> list[str]:
        keys: list[str] = []
        for path in sorted(self.base_path.rglob("*")):
            if not path.is_file() or path.name.endswith(META_SUFFIX) or path.suffix == ".tmp":
                continue
            key = path.relative_to(self.base_path).as_posix()
            if key.startswith(prefix):
                keys.append(key)
            if len(keys) >= limit:
                break
        return keys
