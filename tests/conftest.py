"""Pytest configuration for shared test fixtures and environment hooks.

Updates:
  v0.1.0 - 2026-08-20 - Isolate tests from developer configuration and environment overrides.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

_ENV_VARS = (
    "PORT",
    "UCM_PORT",
    "UCM_HOST",
    "UCM_DATA_DIR",
    "UCM_STORAGE_BACKEND",
    "UCM_CONFIG_JSON",
    "UCM_ENV_FILE",
    "NOCODB_BASE_URL",
    "NOCODB_API_TOKEN",
    "NOCODB_TABLE_ID",
    "NOCODB_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from an empty working directory without inherited settings."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
