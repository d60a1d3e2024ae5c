"""Settings management utilities for Use Case Manager configuration.

Updates:
  v0.3.2 - 2026-10-18 - Select NocoDB storage when its token and table id are configured.
  v0.3.1 - 2026-10-02 - Resolve environment names through an explicit alias table.
  v0.3.0 - 2026-09-20 - Add NocoDB request timeout and storage backend selection.
  v0.2.1 - 2026-09-02 - Ignore NocoDB API tokens supplied via JSON configuration.
  v0.2.0 - 2026-08-27 - Load optional JSON configuration ahead of environment values.
  v0.1.0 - 2026-08-20 - Initial pydantic-settings model for port, data dir, and NocoDB.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, cast

from dotenv import dotenv_values
from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_PORT = 3000
DEFAULT_HOST = "127.0.0.1"
DEFAULT_DATA_DIR = Path("data")
DEFAULT_NOCODB_BASE_URL = "http://localhost:8080"
DEFAULT_NOCODB_TIMEOUT_SECONDS = 10.0
STORAGE_BACKENDS: tuple[str, str] = ("local", "nocodb")

CONFIG_JSON_ENV = "UCM_CONFIG_JSON"
ENV_FILE_ENV = "UCM_ENV_FILE"
_DOTENV_FALLBACK_PATH = ".env"
DEFAULT_CONFIG_PATH = Path("config") / "config.json"

logger = logging.getLogger("use_case_manager.settings")

# Field name -> environment variable names, first match wins.
ENV_ALIASES: dict[str, tuple[str, ...]] = {
    "port": ("PORT", "UCM_PORT"),
    "host": ("UCM_HOST",),
    "data_dir": ("UCM_DATA_DIR",),
    "storage_backend": ("UCM_STORAGE_BACKEND",),
    "nocodb_base_url": ("NOCODB_BASE_URL",),
    "nocodb_api_token": ("NOCODB_API_TOKEN",),
    "nocodb_table_id": ("NOCODB_TABLE_ID",),
    "nocodb_timeout_seconds": ("NOCODB_TIMEOUT_SECONDS",),
}


def _read_dotenv_values() -> dict[str, str]:
    """Load ``.env`` entries into a mapping without mutating ``os.environ``."""
    env_file_override = os.getenv(ENV_FILE_ENV)
    if env_file_override is not None:
        candidate = env_file_override.strip()
        if not candidate:
            return {}
        path = Path(candidate).expanduser()
    else:
        path = Path(_DOTENV_FALLBACK_PATH)
    if not path.is_file():
        return {}
    raw_values = dotenv_values(str(path))
    return {str(key): str(value) for key, value in raw_values.items() if value is not None}


class SettingsError(Exception):
    """Raised when Use Case Manager configuration cannot be loaded or validated."""


class UseCaseManagerSettings(BaseSettings):
    """Application configuration sourced from keyword overrides, JSON, env, and ``.env``."""

    port: int = Field(
        default=DEFAULT_PORT,
        description="HTTP listen port for the web API.",
    )
    host: str = Field(
        default=DEFAULT_HOST,
        description="Interface the web API binds to.",
    )
    data_dir: Path = Field(
        default=DEFAULT_DATA_DIR,
        description="Directory holding the JSON document and backups.",
    )
    storage_backend: Literal["local", "nocodb"] | None = Field(
        default=None,
        description="Persistence backend; resolved from NocoDB credentials when unset.",
    )
    nocodb_base_url: str = Field(
        default=DEFAULT_NOCODB_BASE_URL,
    )
    nocodb_api_token: str | None = Field(
        default=None,
        repr=False,
    )
    nocodb_table_id: str | None = Field(
        default=None,
    )
    nocodb_timeout_seconds: float = Field(
        default=DEFAULT_NOCODB_TIMEOUT_SECONDS,
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("data_dir", mode="before")
    def _normalise_path(cls, value: Any) -> Path:
        """Expand user-relative paths and coerce values to Path instances."""
        if value is None or str(value).strip() == "":
            raise ValueError("a filesystem path is required")
        return Path(str(value).strip()).expanduser()

    @field_validator("port")
    def _validate_port(cls, value: int) -> int:
        """Ensure the port lies in the TCP range."""
        if not 0 < value < 65536:
            raise ValueError("port must be between 1 and 65535")
        return value

    @field_validator("storage_backend", mode="before")
    def _normalise_storage_backend(cls, value: object) -> str | None:
        if value is None:
            return None
        return str(value).strip().lower() or None

    @field_validator("nocodb_base_url", mode="before")
    def _normalise_base_url(cls, value: object) -> str:
        if value is None:
            return DEFAULT_NOCODB_BASE_URL
        text = str(value).strip().rstrip("/")
        return text or DEFAULT_NOCODB_BASE_URL

    @field_validator("nocodb_api_token", "nocodb_table_id", mode="before")
    def _strip_strings(cls, value: str | None) -> str | None:
        """Normalise optional strings by stripping whitespace and empty values."""
        if value is None:
            return None
        stripped = str(value).strip()
        return stripped or None

    @field_validator("nocodb_timeout_seconds")
    def _validate_timeout(cls, value: float) -> float:
        """Ensure the request timeout is positive."""
        if value <= 0:
            raise ValueError("nocodb_timeout_seconds must be greater than zero")
        return value

    @model_validator(mode="after")
    def _resolve_storage_backend(self) -> UseCaseManagerSettings:
        if self.storage_backend is None:
            resolved = "nocodb" if self.nocodb_configured else "local"
            object.__setattr__(self, "storage_backend", resolved)
        return self

    @property
    def nocodb_configured(self) -> bool:
        """Return True when both the NocoDB token and table id are present."""
        return bool(self.nocodb_api_token and self.nocodb_table_id)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Define configuration source precedence.

        Order (highest → lowest):
            1. Explicit keyword arguments (e.g. load_settings(port=8080)).
            2. JSON configuration file (``UCM_CONFIG_JSON`` or config/config.json).
            3. Environment variables, then ``.env`` values, via ``ENV_ALIASES``.
            4. File secrets.
        """

        def env_with_aliases(_: BaseSettings | None = None) -> dict[str, Any]:
            data: dict[str, Any] = {}
            dotenv_data = _read_dotenv_values()

            def _lookup(candidate: str) -> str | None:
                value = os.getenv(candidate)
                if value is None:
                    value = dotenv_data.get(candidate)
                if value is None:
                    return None
                stripped_value = str(value).strip()
                return stripped_value or None

            for field, names in ENV_ALIASES.items():
                for name in names:
                    value = _lookup(name)
                    if value is not None:
                        data[field] = value
                        break
            return data

        return (
            init_settings,
            cls._json_config_settings_source(settings_cls),
            cast("PydanticBaseSettingsSource", env_with_aliases),
            file_secret_settings,
        )

    @classmethod
    def _json_config_settings_source(
        cls,
        _: type[BaseSettings],
    ) -> PydanticBaseSettingsSource:
        """Return settings extracted from an optional JSON config file."""

        def _loader(_: BaseSettings | None = None) -> dict[str, Any]:
            explicit_path = os.getenv(CONFIG_JSON_ENV)
            if explicit_path:
                path = Path(explicit_path).expanduser()
                if not path.exists():
                    raise SettingsError(f"Configuration file not found: {path}")
            else:
                path = DEFAULT_CONFIG_PATH
                if not path.exists():
                    return {}
            try:
                raw_contents = path.read_text(encoding="utf-8")
            except OSError as exc:  # pragma: no cover - filesystem failure is env-specific
                raise SettingsError(f"Unable to read configuration file: {path}") from exc
            try:
                data = json.loads(raw_contents)
            except json.JSONDecodeError as exc:
                raise SettingsError(f"Invalid JSON in configuration file: {path}") from exc
            if not isinstance(data, dict):
                raise SettingsError(f"Configuration file {path} must contain a JSON object")
            mapping_data = cast("Mapping[object, Any]", data)
            data_dict: dict[str, Any] = {str(key): value for key, value in mapping_data.items()}
            removed_secrets = [
                key
                for key in ("nocodb_api_token", "NOCODB_API_TOKEN")
                if data_dict.pop(key, None) is not None
            ]
            if removed_secrets:
                logger.warning(
                    "Ignoring secret key(s) %s in configuration file %s; "
                    "set credentials via environment variables instead.",
                    ", ".join(sorted(removed_secrets)),
                    path,
                )
            allowed = set(cls.model_fields) - {"nocodb_api_token"}
            return {key: value for key, value in data_dict.items() if key in allowed}

        return cast("PydanticBaseSettingsSource", _loader)


def load_settings(**overrides: Any) -> UseCaseManagerSettings:
    """Return validated settings, raising SettingsError on failure."""
    try:
        return UseCaseManagerSettings(**overrides)
    except SettingsError:
        raise
    except ValidationError as exc:
        raise SettingsError("Invalid Use Case Manager configuration") from exc


__all__ = [
    "CONFIG_JSON_ENV",
    "ENV_ALIASES",
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
