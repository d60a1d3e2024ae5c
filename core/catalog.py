"""In-memory use case catalog backed by a storage backend.

The catalog owns the authoritative list of :class:`~models.use_case_model.UseCase`
objects for the process. Reads are served from memory; every mutation is
applied in memory, persisted through the backend, and reverted when the
backend reports a failure.

Updates:
  v0.3.1 - 2026-10-18 - Reject creates that reuse an existing identifier.
  v0.3.0 - 2026-09-20 - Roll back in-memory updates when persistence fails.
  v0.2.0 - 2026-09-02 - Serialise mutations behind a re-entrant lock.
  v0.1.0 - 2026-08-20 - Initial catalog with filters, stats, and backup delegation.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from models.use_case_model import UseCase

from .exceptions import UseCaseConflictError, UseCaseStorageError

if TYPE_CHECKING:
    from pathlib import Path

    from .storage import StorageBackend

logger = logging.getLogger("use_case_manager.catalog")

FILTER_KEYS: tuple[str, ...] = (
    "status",
    "category",
    "priority",
    "tag",
    "implementationStatus",
    "search",
)
_FILTER_ALIASES: dict[str, str] = {
    "implementation": "implementationStatus",
    "implementation_status": "implementationStatus",
}


def normalise_filters(filters: Mapping[str, Any] | None) -> dict[str, str]:
    """Collapse accepted filter spellings into canonical keys and drop empty values."""
    if not filters:
        return {}
    cleaned: dict[str, str] = {}
    for key, value in filters.items():
        canonical = _FILTER_ALIASES.get(key, key)
        if canonical not in FILTER_KEYS:
            continue
        if value is None or value == "":
            continue
        cleaned[canonical] = str(value)
    return cleaned


def _matches(use_case: UseCase, filters: Mapping[str, str]) -> bool:
    if "status" in filters and use_case.status != filters["status"]:
        return False
    if "category" in filters and use_case.category != filters["category"]:
        return False
    if "priority" in filters and use_case.priority != filters["priority"]:
        return False
    if "tag" in filters and filters["tag"] not in use_case.tags:
        return False
    if (
        "implementationStatus" in filters
        and use_case.implementation_status != filters["implementationStatus"]
    ):
        return False
    if "search" in filters:
        term = filters["search"].lower()
        haystacks = [use_case.title, use_case.description, *use_case.tags]
        if not any(term in text.lower() for text in haystacks):
            return False
    return True


@dataclass(slots=True, frozen=True)
class CatalogStats:
    """Aggregate counts over the in-memory catalog."""

    total: int
    by_status: dict[str, int]
    by_category: dict[str, int]
    by_priority: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON payload shape used by the HTTP API."""
        return {
            "total": self.total,
            "byStatus": dict(self.by_status),
            "byCategory": dict(self.by_category),
            "byPriority": dict(self.by_priority),
        }


class UseCaseCatalog:
    """Authoritative in-memory collection of use cases."""

    def __init__(self, backend: StorageBackend, *, autoload: bool = True) -> None:
        self._backend = backend
        self._use_cases: list[UseCase] = []
        self._lock = threading.RLock()
        if autoload:
            self.load()

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    def __len__(self) -> int:
        return len(self._use_cases)

    def load(self) -> list[UseCase]:
        """Replace the in-memory list with the backend's current records."""
        records = self._backend.load()
        loaded: list[UseCase] = []
        for record in records:
            try:
                loaded.append(UseCase.from_record(record))
            except (TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping malformed use case record: %s", exc)
        with self._lock:
            self._use_cases = loaded
        logger.debug("Loaded %d use cases", len(loaded))
        return list(loaded)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, data: Mapping[str, Any] | None = None) -> UseCase:
        """Create, append, and persist a new use case built from *data*."""
        use_case = UseCase.from_record(data or {})
        with self._lock:
            if self._index_of(use_case.id) is not None:
                raise UseCaseConflictError(f"Use case {use_case.id} already exists")
            self._use_cases.append(use_case)
            try:
                stored = self._backend.create(use_case.to_record())
            except Exception:
                self._remove_instance(use_case)
                raise
            if stored is None:
                self._remove_instance(use_case)
                raise UseCaseStorageError(f"Failed to persist use case {use_case.id}")
        logger.info("Created use case %s", use_case.id)
        return use_case

    def update(self, use_case_id: str, data: Mapping[str, Any]) -> UseCase | None:
        """Merge *data* into the identified use case and persist the change."""
        with self._lock:
            use_case = self.get_by_id(use_case_id)
            if use_case is None:
                return None
            snapshot = copy.deepcopy(use_case)
            applied_keys = use_case.update(data)
            record = use_case.to_record()
            fields = {key: record[key] for key in applied_keys}
            try:
                persisted = self._backend.update(use_case_id, fields)
            except Exception:
                self._restore(use_case, snapshot)
                raise
            if not persisted:
                self._restore(use_case, snapshot)
                raise UseCaseStorageError(f"Failed to persist update for use case {use_case_id}")
        logger.info("Updated use case %s", use_case_id)
        return use_case

    def delete(self, use_case_id: str) -> UseCase | None:
        """Remove the identified use case from memory and the backend."""
        with self._lock:
            index = self._index_of(use_case_id)
            if index is None:
                return None
            removed = self._use_cases.pop(index)
            try:
                deleted = self._backend.delete(use_case_id)
            except Exception:
                self._use_cases.insert(index, removed)
                raise
            if not deleted:
                self._use_cases.insert(index, removed)
                raise UseCaseStorageError(f"Failed to delete use case {use_case_id}")
        logger.info("Deleted use case %s", use_case_id)
        return removed

    def backup(self) -> Path | None:
        """Delegate snapshot creation to the storage backend."""
        return self._backend.backup()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all(self, filters: Mapping[str, Any] | None = None) -> list[UseCase]:
        """Return use cases matching every supplied filter, in insertion order."""
        criteria = normalise_filters(filters)
        snapshot = list(self._use_cases)
        if not criteria:
            return snapshot
        return [use_case for use_case in snapshot if _matches(use_case, criteria)]

    def get_by_id(self, use_case_id: str) -> UseCase | None:
        for use_case in self._use_cases:
            if use_case.id == use_case_id:
                return use_case
        return None

    def get_categories(self) -> list[str]:
        return sorted({uc.category for uc in self._use_cases if uc.category})

    def get_tags(self) -> list[str]:
        return sorted({tag for uc in self._use_cases for tag in uc.tags if tag})

    def get_stats(self) -> CatalogStats:
        """Return total count and status/category/priority frequency tables."""
        snapshot = list(self._use_cases)
        return CatalogStats(
            total=len(snapshot),
            by_status=dict(Counter(uc.status for uc in snapshot)),
            by_category=dict(Counter(uc.category for uc in snapshot)),
            by_priority=dict(Counter(uc.priority for uc in snapshot)),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _index_of(self, use_case_id: str) -> int | None:
        for index, use_case in enumerate(self._use_cases):
            if use_case.id == use_case_id:
                return index
        return None

    def _remove_instance(self, use_case: UseCase) -> None:
        for index, candidate in enumerate(self._use_cases):
            if candidate is use_case:
                del self._use_cases[index]
                return

    @staticmethod
    def _restore(target: UseCase, snapshot: UseCase) -> None:
        for name in UseCase.__slots__:
            setattr(target, name, getattr(snapshot, name))


__all__ = ["CatalogStats", "FILTER_KEYS", "UseCaseCatalog", "normalise_filters"]
