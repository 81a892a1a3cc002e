from __future__ import annotations

import os
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BackendName = Literal["local", "s3", "memory"]


class StorageSettings(BaseSettings):
    """
    Storage settings.

    Env support:
      STORAGE_BACKEND            local | s3 | memory (auto-detected when unset)
      STORAGE_BASE_PATH          directory for the local backend
      STORAGE_BASE_URL           URL prefix the local files are served under
      STORAGE_SIGNING_SECRET     sign local URLs (private files)
      STORAGE_S3_BUCKET / _REGION / _ENDPOINT / _ACCESS_KEY / _SECRET_KEY / _PUBLIC_URL
      STORAGE_MAX_UPLOAD_BYTES   per-file limit enforced before any write

    AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY / AWS_DEFAULT_REGION are used
    when the STORAGE_S3_* credentials are not set.
    """

    backend: Optional[BackendName] = None

    base_path: str = "uploads"
    base_url: str = "/uploads"
    signing_secret: Optional[str] = None

    s3_bucket: Optional[str] = None
    s3_region: Optional[str] = None
    s3_endpoint: Optional[str] = None
    s3_access_key: Optional[str] = None
    s3_secret_key: Optional[str] = None
    s3_public_url: Optional[str] = None

    max_upload_bytes: int = Field(default=5 * 1024 * 1024)

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def railway_volume(self) -> Optional[str]:
        return os.getenv("RAILWAY_VOLUME_MOUNT_PATH")

    @property
    def resolved_s3_region(self) -> str:
        return self.s3_region or os.getenv("AWS_DEFAULT_REGION") or "us-east-1"

    @property
    def resolved_s3_access_key(self) -> Optional[str]:
        return self.s3_access_key or os.getenv("AWS_ACCESS_KEY_ID")

    @property
    def resolved_s3_secret_key(self) -> Optional[str]:
        return self.s3_secret_key or os.getenv("AWS_SECRET_ACCESS_KEY")

    def detect_backend(self) -> BackendName:
        """Explicit choice first, then a Railway volume, then an S3 bucket, else local disk."""
        if self.backend:
            return self.backend
        if self.railway_volume:
            return "local"
        if self.s3_bucket:
            return "s3"
        return "local"
