"""Printable summaries for Use Case Manager configuration.

Updates:
  v0.1.1 - 2026-09-20 - Show the NocoDB timeout and whether remote storage is configured.
  v0.1.0 - 2026-08-20 - Render resolved settings with masked credentials.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .utils import describe_path, mask_secret

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from config import UseCaseManagerSettings


def print_settings_summary(settings: UseCaseManagerSettings) -> None:
    """Emit a readable summary of storage and server configuration."""
    data_dir_desc = describe_path(settings.data_dir, expect_directory=True)
    remote_ready = "yes" if settings.nocodb_configured else "no (local fallback)"

    lines = [
        "Use Case Manager configuration summary",
        "--------------------------------------",
        f"Storage backend: {settings.storage_backend}",
        f"Data directory: {data_dir_desc}",
        "",
        "Web API",
        "-------",
        f"Host: {settings.host}",
        f"Port: {settings.port}",
        "",
        "NocoDB",
        "------",
        f"Base URL: {settings.nocodb_base_url}",
        f"API token: {mask_secret(settings.nocodb_api_token)}",
        f"Table id: {settings.nocodb_table_id or 'not set'}",
        f"Request timeout (seconds): {settings.nocodb_timeout_seconds:g}",
        f"Remote storage configured: {remote_ready}",
    ]
    print("\n".join(lines))
