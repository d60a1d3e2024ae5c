"""Shared storage helpers, backend protocol, and logger.

Updates:
  v0.2.0 - 2026-09-02 - Write documents through a temporary file and atomic replace.
  v0.1.0 - 2026-08-20 - Extract backend protocol and JSON helpers.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

logger = logging.getLogger("use_case_manager.storage")

DATA_FILE_NAME = "use-cases.json"

RawRecord = dict[str, Any]


@runtime_checkable
class StorageBackend(Protocol):
    """Persistence contract shared by the local file and remote record stores."""

    def load(self) -> list[RawRecord]:
        """Return every stored record mapping; never raises for read failures."""
        ...

    def create(self, record: Mapping[str, Any]) -> RawRecord | None:
        """Persist *record* and return the stored representation."""
        ...

    def update(self, use_case_id: str, fields: Mapping[str, Any]) -> bool:
        """Merge *fields* into the record identified by *use_case_id*."""
        ...

    def delete(self, use_case_id: str) -> bool:
        """Remove the record identified by *use_case_id*."""
        ...

    def backup(self) -> Path | None:
        """Write a timestamped snapshot and return its path."""
        ...


def ensure_directory(path: Path) -> None:
    """Ensure *path* exists as a directory."""
    path.mkdir(parents=True, exist_ok=True)


def backup_timestamp(moment: datetime | None = None) -> str:
    """Return a filesystem-safe ISO-8601 timestamp (``:`` and ``.`` replaced by ``-``)."""
    value = (moment or datetime.now(UTC)).astimezone(UTC)
    iso = value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


def json_dumps_records(records: Sequence[Mapping[str, Any]]) -> str:
    """Serialise record mappings as an indented JSON array."""
    return json.dumps([dict(record) for record in records], ensure_ascii=False, indent=2)


def write_json_atomic(path: Path, records: Sequence[Mapping[str, Any]]) -> None:
    """Overwrite *path* with *records* via a sibling temp file and ``os.replace``."""
    payload = json_dumps_records(records)
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.write("\n")
        os.replace(temp_name, path)
    except BaseException:
        try:
            os.unlink(temp_name)
        except OSError:
            pass
        raise


__all__ = [
    "DATA_FILE_NAME",
    "RawRecord",
    "StorageBackend",
    "backup_timestamp",
    "ensure_directory",
    "json_dumps_records",
    "logger",
    "write_json_atomic",
]
