"""Local JSON document backend.

Updates:
  v0.2.1 - 2026-10-18 - Refuse writes while the document cannot be parsed.
  v0.2.0 - 2026-09-02 - Match legacy ``case_id`` identifiers during updates and deletes.
  v0.1.0 - 2026-08-20 - Extract JSON file persistence into a dedicated backend.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any

from models.use_case_model import record_matches_id

from .base import (
    DATA_FILE_NAME,
    RawRecord,
    backup_timestamp,
    ensure_directory,
    logger,
    write_json_atomic,
)

if TYPE_CHECKING:
    from collections.abc import Mapping


class JsonFileBackend:
    """Persist use cases as a single JSON array document under *data_dir*."""

    backup_prefix = "use-cases-backup"

    def __init__(self, data_dir: str | Path = "data", *, file_name: str = DATA_FILE_NAME) -> None:
        self._data_dir = Path(data_dir).expanduser()
        self._data_file = self._data_dir / file_name
        self._initialised = False

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def data_file(self) -> Path:
        return self._data_file

    def _ensure_document(self) -> bool:
        """Create the data directory and an empty document on first use."""
        if self._initialised:
            return True
        try:
            ensure_directory(self._data_dir)
            if not self._data_file.exists():
                write_json_atomic(self._data_file, [])
        except OSError as exc:
            logger.error("Unable to prepare data file %s: %s", self._data_file, exc)
            return False
        self._initialised = True
        return True

    def _read_records(self) -> list[RawRecord] | None:
        """Return the document's records, or ``None`` when it cannot be read."""
        if not self._ensure_document():
            return None
        try:
            contents = self._data_file.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Error loading data from %s: %s", self._data_file, exc)
            return None
        if not contents.strip():
            return []
        try:
            parsed: object = json.loads(contents)
        except json.JSONDecodeError as exc:
            logger.error("Error loading data from %s: %s", self._data_file, exc)
            return None
        if not isinstance(parsed, list):
            logger.error("Data file %s does not contain a JSON array", self._data_file)
            return None
        return [dict(item) for item in parsed if isinstance(item, dict)]

    def load(self) -> list[RawRecord]:
        """Return every record in the document, or an empty list when unreadable."""
        records = self._read_records()
        return [] if records is None else records

    def _writable_records(self) -> list[RawRecord] | None:
        records = self._read_records()
        if records is None:
            logger.error("Refusing to overwrite unreadable data file %s", self._data_file)
        return records

    def save(self, records: list[RawRecord]) -> bool:
        """Overwrite the document with *records*."""
        if not self._ensure_document():
            return False
        try:
            write_json_atomic(self._data_file, records)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error saving data to %s: %s", self._data_file, exc)
            return False
        return True

    def create(self, record: Mapping[str, Any]) -> RawRecord | None:
        records = self._writable_records()
        if records is None:
            return None
        stored = dict(record)
        records.append(stored)
        if not self.save(records):
            return None
        return stored

    def update(self, use_case_id: str, fields: Mapping[str, Any]) -> bool:
        records = self._writable_records()
        if records is None:
            return False
        for index, existing in enumerate(records):
            if record_matches_id(existing, use_case_id):
                records[index] = {**existing, **fields}
                return self.save(records)
        logger.warning("Use case %s not found in %s", use_case_id, self._data_file)
        return False

    def delete(self, use_case_id: str) -> bool:
        records = self._writable_records()
        if records is None:
            return False
        for index, existing in enumerate(records):
            if record_matches_id(existing, use_case_id):
                del records[index]
                return self.save(records)
        logger.warning("Use case %s not found in %s", use_case_id, self._data_file)
        return False

    def backup(self) -> Path | None:
        """Copy the current document verbatim to a timestamped sibling file."""
        if not self._ensure_document():
            return None
        backup_file = self._data_dir / f"{self.backup_prefix}-{backup_timestamp()}.json"
        try:
            shutil.copyfile(self._data_file, backup_file)
        except OSError as exc:
            logger.error("Error creating backup %s: %s", backup_file, exc)
            return None
        logger.info("Backup written to %s", backup_file)
        return backup_file


__all__ = ["JsonFileBackend"]
