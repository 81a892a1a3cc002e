from __future__ import annotations

from school_cms.exceptions import SchoolCmsError


class StorageWriteError(SchoolCmsError):
    """Storing an upload failed; the enclosing operation must not mutate anything."""

    status_code = 502


class StorageDeleteError(SchoolCmsError):
    """Removing a superseded or orphaned blob failed; non-fatal to the record operation."""

    status_code = 502

    def __init__(self, message: str, *, ref: str):
        super().__init__(message)
        self.ref = ref


def upload_too_large(filename: str, size: int, limit: int) -> StorageWriteError:
    return StorageWriteError(f"Upload {filename!r} is {size} bytes; limit is {limit}", status_code=413)
