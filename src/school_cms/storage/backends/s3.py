from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..base import (
    FileNotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
    StorageError,
    validate_key,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
_DENIED_CODES = {"403", "AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch"}
_QUOTA_CODES = {"EntityTooLarge", "QuotaExceeded"}


class S3Backend:
    """Blob store on any S3-compatible service (AWS, Supabase, MinIO, Spaces...).

    With ``public_url`` set (a public bucket or CDN) URLs are plain
    ``{public_url}/{key}``; otherwise they are presigned GET URLs.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        public_url: Optional[str] = None,
        force_path_style: bool = True,
    ):
        self.bucket = bucket
        self.region = region
        self.endpoint = endpoint
        self.public_url = public_url.rstrip("/") if public_url else None
        self._session = aioboto3.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )
        self._config = Config(s3={"addressing_style": "path"} if force_path_style else {})

    def _client(self):
        return self._session.client("s3", endpoint_url=self.endpoint, config=self._config)

    def _translate(self, exc: Exception, key: str) -> StorageError:
        if isinstance(exc, ClientError):
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                return FileNotFoundError(f"File not found: {key}")
            if code in _DENIED_CODES:
                return PermissionDeniedError(f"Access denied for {key}: {code}")
            if code in _QUOTA_CODES:
                return QuotaExceededError(f"Storage quota exceeded for {key}: {code}")
        return StorageError(f"S3 operation failed for {key}: {exc}")

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> str:
        validate_key(key)
        try:
            async with self._client() as s3:
                await s3.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=data,
                    ContentType=content_type,
                    Metadata={k: str(v) for k, v in (metadata or {}).items()},
                )
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, key) from exc
        return await self.get_url(key)

    async def get(self, key: str) -> bytes:
        validate_key(key)
        try:
            async with self._client() as s3:
                resp = await s3.get_object(Bucket=self.bucket, Key=key)
                async with resp["Body"] as stream:
                    return await stream.read()
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, key) from exc

    async def delete(self, key: str) -> bool:
        # S3 deletes are idempotent, so check first to report "already absent"
        if not await self.exists(key):
            return False
        try:
            async with self._client() as s3:
                await s3.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, key) from exc
        return True

    async def exists(self, key: str) -> bool:
        try:
            await self._head(key)
        except FileNotFoundError:
            return False
        return True

    async def _head(self, key: str) -> dict[str, Any]:
        validate_key(key)
        try:
            async with self._client() as s3:
                return await s3.head_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, key) from exc

    async def get_url(self, key: str, expires_in: int = 3600, download: bool = False) -> str:
        # presigned and public URLs are built offline, so confirm the object first
        await self._head(key)
        if self.public_url and not download:
            return f"{self.public_url}/{quote(key)}"
        params: dict[str, Any] = {"Bucket": self.bucket, "Key": key}
        if download:
            params["ResponseContentDisposition"] = f'attachment; filename="{key.rsplit("/", 1)[-1]}"'
        try:
            async with self._client() as s3:
                return await s3.generate_presigned_url(
                    "get_object", Params=params, ExpiresIn=expires_in
                )
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, key) from exc

    async def get_metadata(self, key: str) -> dict[str, Any]:
        head = await self._head(key)
        last_modified = head.get("LastModified")
        return {
            **head.get("Metadata", {}),
            "size": head.get("ContentLength", 0),
            "content_type": head.get("ContentType", "application/octet-stream"),
            "created_at": last_modified.isoformat() if last_modified else None,
        }

    async def list_keys(self, prefix: str = "", limit: int = 1000) -> list[str]:
        keys: list[str] = []
        try:
            async with self._client() as s3:
                paginator = s3.get_paginator("list_objects_v2")
                async for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                    for obj in page.get("Contents", []):
                        keys.append(obj["Key"])
                        if len(keys) >= limit:
                            return keys
        except (ClientError, BotoCoreError) as exc:
            raise self._translate(exc, prefix or "*") from exc
        return keys
