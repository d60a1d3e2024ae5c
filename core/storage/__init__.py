"""Persistence backends for the use case catalog.

Updates:
  v0.2.0 - 2026-09-02 - Add NocoDB backend with one-way local fallback.
  v0.1.0 - 2026-08-20 - Split JSON file persistence into a storage package.
"""

from __future__ import annotations

from .base import (
    DATA_FILE_NAME,
    RawRecord,
    StorageBackend,
    backup_timestamp,
    write_json_atomic,
)
from .local import JsonFileBackend
from .nocodb import BackendMode, NocoDBBackend

__all__ = [
    "BackendMode",
    "DATA_FILE_NAME",
    "JsonFileBackend",
    "NocoDBBackend",
    "RawRecord",
    "StorageBackend",
    "backup_timestamp",
    "write_json_atomic",
]
