"""Factories for constructing storage backends and catalogs from validated settings.

Updates:
  v0.2.0 - 2026-09-20 - Honour the configured NocoDB request timeout.
  v0.1.0 - 2026-08-20 - Build JSON or NocoDB backends and the catalog from settings.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .catalog import UseCaseCatalog
from .storage import JsonFileBackend, NocoDBBackend

if TYPE_CHECKING:  # pragma: no cover - typing only
    import httpx

    from config import UseCaseManagerSettings

    from .storage import StorageBackend
else:  # pragma: no cover - typing only
    UseCaseManagerSettings = Any

factory_logger = logging.getLogger("use_case_manager.factory")


def build_storage_backend(
    settings: UseCaseManagerSettings,
    *,
    client_factory: Callable[[], httpx.Client] | None = None,
) -> StorageBackend:
    """Return the persistence backend selected by ``settings.storage_backend``."""
    if settings.storage_backend == "nocodb":
        if not settings.nocodb_configured:
            factory_logger.warning(
                "NocoDB storage selected without API token/table id; records will be kept in %s",
                settings.data_dir,
            )
        return NocoDBBackend(
            base_url=settings.nocodb_base_url,
            api_token=settings.nocodb_api_token,
            table_id=settings.nocodb_table_id,
            data_dir=settings.data_dir,
            timeout_seconds=settings.nocodb_timeout_seconds,
            client_factory=client_factory,
        )
    factory_logger.debug("Using local JSON storage at %s", settings.data_dir)
    return JsonFileBackend(settings.data_dir)


def build_catalog(
    settings: UseCaseManagerSettings,
    *,
    backend: StorageBackend | None = None,
    autoload: bool = True,
) -> UseCaseCatalog:
    """Return a UseCaseCatalog wired to the configured (or supplied) backend."""
    resolved_backend = backend if backend is not None else build_storage_backend(settings)
    return UseCaseCatalog(resolved_backend, autoload=autoload)


__all__ = ["build_catalog", "build_storage_backend"]
