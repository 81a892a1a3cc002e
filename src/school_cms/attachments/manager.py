"""Attachment lifecycle: one optional blob per record, owned by that record.

The manager decides what a record's attachment reference becomes on
create/update/delete and drives the storage backend accordingly. It never
touches the database; callers hand it a ``persist`` callback when the record
write has to happen between storing the new blob and deleting the old one.

Ordering on update is always: store new blob -> persist record -> delete
superseded blob. A failed store aborts before anything else happens; a failed
persist discards the new blob; a failed delete is reported, never raised,
because the record already points at a valid blob.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from school_cms.storage.base import FileNotFoundError, StorageBackend, StorageError

from .errors import StorageDeleteError, StorageWriteError, upload_too_large
from .uploads import Upload, make_key

logger = logging.getLogger(__name__)

Persist = Callable[[Optional[str]], Awaitable[Any]]


@dataclass
class AttachmentResolution:
    ref: Optional[str]
    superseded: Optional[str] = None
    cleanup_error: Optional[StorageDeleteError] = None
    persisted: Any = None

    @property
    def replaced(self) -> bool:
        return self.superseded is not None


class AttachmentManager:
    def __init__(self, storage: StorageBackend, *, max_upload_bytes: Optional[int] = None):
        self.storage = storage
        self.max_upload_bytes = max_upload_bytes

    async def _store(self, upload: Upload, prefix: str) -> str:
        if self.max_upload_bytes is not None and upload.size > self.max_upload_bytes:
            raise upload_too_large(upload.filename, upload.size, self.max_upload_bytes)
        key = make_key(prefix, upload.filename)
        try:
            await self.storage.put(
                key,
                upload.data,
                upload.content_type,
                metadata={"original_filename": upload.filename},
            )
        except StorageError as exc:
            logger.warning("Upload of %r failed: %s", upload.filename, exc, extra={"storage_key": key})
            status = exc.status_code if exc.status_code in (400, 403, 413) else 502
            raise StorageWriteError(f"Failed to store {upload.filename!r}: {exc}", status_code=status) from exc
        logger.info("Stored %s (%d bytes)", key, upload.size, extra={"storage_key": key})
        return key

    async def _remove(self, ref: str) -> bool:
        try:
            removed = await self.storage.delete(ref)
        except StorageError as exc:
            raise StorageDeleteError(f"Failed to delete {ref!r}: {exc}", ref=ref) from exc
        if not removed:
            logger.debug("Blob %s already absent", ref, extra={"storage_key": ref})
        return removed

    async def resolve_for_create(self, upload: Optional[Upload], *, prefix: str = "") -> Optional[str]:
        """Store the upload and return its reference, or None without one."""
        if upload is None:
            return None
        return await self._store(upload, prefix)

    async def resolve_for_update(
        self,
        existing_ref: Optional[str],
        upload: Optional[Upload],
        *,
        prefix: str = "",
        persist: Optional[Persist] = None,
    ) -> AttachmentResolution:
        """Resolve the reference after an update.

        Without an upload the existing reference is kept as is. With one, the
        new blob is stored, ``persist(new_ref)`` runs (if given), and only then
        the superseded blob is deleted.
        """
        if upload is None:
            persisted = await persist(existing_ref) if persist else None
            return AttachmentResolution(ref=existing_ref, persisted=persisted)

        new_ref = await self._store(upload, prefix)

        persisted = None
        if persist is not None:
            try:
                persisted = await persist(new_ref)
            except Exception:
                await self.discard(new_ref)
                raise

        resolution = AttachmentResolution(ref=new_ref, persisted=persisted)
        if existing_ref and existing_ref != new_ref:
            resolution.superseded = existing_ref
            try:
                await self._remove(existing_ref)
            except StorageDeleteError as exc:
                logger.warning(
                    "Superseded blob %s was not deleted: %s", existing_ref, exc,
                    extra={"storage_key": existing_ref},
                )
                resolution.cleanup_error = exc
        return resolution

    async def resolve_for_delete(self, existing_ref: Optional[str]) -> None:
        """Delete the record's blob; an already-absent blob counts as deleted."""
        if not existing_ref:
            return
        await self._remove(existing_ref)

    async def discard(self, ref: Optional[str]) -> None:
        """Best-effort removal of a blob stored by this request that no record will own."""
        if not ref:
            return
        try:
            await self._remove(ref)
        except StorageDeleteError:
            logger.error("Orphaned blob %s could not be removed", ref, exc_info=True, extra={"storage_key": ref})

    async def url_for(self, ref: Optional[str]) -> Optional[str]:
        if not ref:
            return None
        try:
            return await self.storage.get_url(ref)
        except FileNotFoundError:
            logger.debug("No blob behind reference %s", ref)
            return None
        except StorageError:
            logger.warning("Could not build URL for %s", ref, exc_info=True)
            return None
