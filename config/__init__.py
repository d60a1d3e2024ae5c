"""Configuration helpers for Use Case Manager.

Updates: v0.2.0 - 2026-09-20 - Expose storage backend and NocoDB defaults.
Updates: v0.1.0 - 2026-08-20 - Expose settings loader and configuration error types.
"""

from .settings import (
    CONFIG_JSON_ENV,
    DEFAULT_DATA_DIR,
    DEFAULT_HOST,
    DEFAULT_NOCODB_BASE_URL,
    DEFAULT_NOCODB_TIMEOUT_SECONDS,
    DEFAULT_PORT,
    STORAGE_BACKENDS,
    SettingsError,
    UseCaseManagerSettings,
    load_settings,
)

__all__ = [
    "CONFIG_JSON_ENV",
    "DEFAULT_DATA_DIR",
    "DEFAULT_HOST",
    "DEFAULT_NOCODB_BASE_URL",
    "DEFAULT_NOCODB_TIMEOUT_SECONDS",
    "DEFAULT_PORT",
    "STORAGE_BACKENDS",
    "SettingsError",
    "UseCaseManagerSettings",
    "load_settings",
]
