"""Blob storage for uploaded images and documents.

Layer 0 of the attachment stack: backends only know keys and bytes. The
attachment manager (``school_cms.attachments``) decides which keys a record
owns and when they are created or removed.
"""

from .add import StorageDep, add_storage, get_storage
from .backends import LocalBackend, MemoryBackend, S3Backend
from .base import (
    FileNotFoundError,
    InvalidKeyError,
    PermissionDeniedError,
    QuotaExceededError,
    StorageBackend,
    StorageError,
)
from .easy import easy_storage
from .settings import StorageSettings

__all__ = [
    "StorageBackend",
    "StorageError",
    "FileNotFoundError",
    "InvalidKeyError",
    "PermissionDeniedError",
    "QuotaExceededError",
    "LocalBackend",
    "MemoryBackend",
    "S3Backend",
    "StorageSettings",
    "easy_storage",
    "add_storage",
    "get_storage",
    "StorageDep",
]
