"""Core service layer for Use Case Manager.

Updates:
  v0.3.0 - 2026-09-20 - Export backend mode enum for diagnostics.
  v0.2.0 - 2026-09-02 - Export NocoDB backend and storage error types.
  v0.1.0 - 2026-08-20 - Surface UseCaseCatalog, JSON storage, and factory helpers.
"""

from models.use_case_model import UseCase

from .catalog import CatalogStats, UseCaseCatalog, normalise_filters
from .exceptions import (
    UseCaseConflictError,
    UseCaseManagerError,
    UseCaseNotFoundError,
    UseCaseStorageError,
)
from .factory import build_catalog, build_storage_backend
from .storage import BackendMode, JsonFileBackend, NocoDBBackend, StorageBackend

__all__ = [
    "BackendMode",
    "CatalogStats",
    "JsonFileBackend",
    "NocoDBBackend",
    "StorageBackend",
    "UseCase",
    "UseCaseCatalog",
    "UseCaseConflictError",
    "UseCaseManagerError",
    "UseCaseNotFoundError",
    "UseCaseStorageError",
    "build_catalog",
    "build_storage_backend",
    "normalise_filters",
]
