from __future__ import annotations

import logging
from typing import Any, Optional

from .base import StorageBackend
from .settings import StorageSettings

logger = logging.getLogger(__name__)

# endpoint substring -> provider name, for startup logs
_S3_PROVIDERS = {
    "supabase.co": "Supabase Storage",
    "digitaloceanspaces.com": "DigitalOcean Spaces",
    "wasabisys.com": "Wasabi",
    "backblazeb2.com": "Backblaze B2",
    "r2.cloudflarestorage.com": "Cloudflare R2",
    "localhost": "Minio (local)",
    "127.0.0.1": "Minio (local)",
}


def _provider_name(endpoint: Optional[str]) -> str:
    if not endpoint:
        return "AWS S3"
    for marker, name in _S3_PROVIDERS.items():
        if marker in endpoint:
            return name
    return "S3-compatible"


def easy_storage(
    backend: Optional[str] = None,
    settings: Optional[StorageSettings] = None,
    **kwargs: Any,
) -> StorageBackend:
    """Build the storage backend once, at startup.

    ``backend`` forces an implementation; keyword arguments override the
    matching constructor parameters. Otherwise the choice comes from
    ``StorageSettings.detect_backend()``.

    Example:
        >>> storage = easy_storage()                       # from env
        >>> storage = easy_storage(backend="memory")       # tests
        >>> storage = easy_storage(backend="local", base_path="/data/uploads")
    """
    settings = settings or StorageSettings()
    kind = backend or settings.detect_backend()

    if kind == "memory":
        from .backends.memory import MemoryBackend

        logger.warning("Using in-memory storage; uploaded files are lost on restart")
        return MemoryBackend(**kwargs)

    if kind == "local":
        from .backends.local import LocalBackend

        base_path = kwargs.pop("base_path", None) or settings.railway_volume or settings.base_path
        storage = LocalBackend(
            base_path=base_path,
            base_url=kwargs.pop("base_url", settings.base_url),
            signing_secret=kwargs.pop("signing_secret", settings.signing_secret),
        )
        logger.info("Using local storage at %s (served under %s)", storage.base_path, storage.base_url)
        return storage

    if kind == "s3":
        from .backends.s3 import S3Backend

        bucket = kwargs.pop("bucket", settings.s3_bucket)
        if not bucket:
            raise ValueError("STORAGE_S3_BUCKET must be set for the s3 storage backend")
        storage = S3Backend(
            bucket=bucket,
            region=kwargs.pop("region", settings.resolved_s3_region),
            endpoint=kwargs.pop("endpoint", settings.s3_endpoint),
            access_key=kwargs.pop("access_key", settings.resolved_s3_access_key),
            secret_key=kwargs.pop("secret_key", settings.resolved_s3_secret_key),
            public_url=kwargs.pop("public_url", settings.s3_public_url),
        )
        logger.info("Using %s bucket %r", _provider_name(storage.endpoint), bucket)
        return storage

    raise ValueError(f"Unknown storage backend: {kind!r} (expected local, s3 or memory)")
