"""Tests for configuration loading and validation logic.

Updates:
  v0.2.1 - 2026-10-18 - Cover NocoDB selection from credentials alone.
  v0.2.0 - 2026-09-20 - Cover storage backend selection and NocoDB timeout validation.
  v0.1.1 - 2026-09-02 - Warn and ignore NocoDB API tokens supplied via JSON configuration.
  v0.1.0 - 2026-08-20 - Cover defaults, JSON/env precedence, and validation errors.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from pytest import LogCaptureFixture, MonkeyPatch

from config import SettingsError, UseCaseManagerSettings, load_settings


def test_defaults_without_configuration() -> None:
    """Ensure documented defaults apply when nothing is configured."""
    settings = load_settings()

    assert isinstance(settings, UseCaseManagerSettings)
    assert settings.port == 3000
    assert settings.host == "127.0.0.1"
    assert settings.data_dir == Path("data")
    assert settings.storage_backend == "local"
    assert settings.nocodb_base_url == "http://localhost:8080"
    assert settings.nocodb_api_token is None
    assert settings.nocodb_table_id is None
    assert settings.nocodb_timeout_seconds == 10.0
    assert settings.nocodb_configured is False


def test_environment_variables_are_read(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PORT", "8081")
    monkeypatch.setenv("UCM_DATA_DIR", str(tmp_path / "store"))
    monkeypatch.setenv("UCM_STORAGE_BACKEND", "NocoDB")
    monkeypatch.setenv("NOCODB_BASE_URL", "https://noco.example.com/")
    monkeypatch.setenv("NOCODB_API_TOKEN", " token-value ")
    monkeypatch.setenv("NOCODB_TABLE_ID", "tbl_1")

    settings = load_settings()

    assert settings.port == 8081
    assert settings.data_dir == tmp_path / "store"
    assert settings.storage_backend == "nocodb"
    assert settings.nocodb_base_url == "https://noco.example.com"
    assert settings.nocodb_api_token == "token-value"
    assert settings.nocodb_configured is True
    assert "token-value" not in repr(settings)


def test_json_precedes_env_and_overrides_win(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Ensure keyword overrides beat JSON, which beats environment variables."""
    config_path = tmp_path / "settings.json"
    config_path.write_text(json.dumps({"port": 4000, "host": "0.0.0.0"}), encoding="utf-8")
    monkeypatch.setenv("UCM_CONFIG_JSON", str(config_path))
    monkeypatch.setenv("PORT", "5000")
    monkeypatch.setenv("NOCODB_TABLE_ID", "from-env")

    settings = load_settings(host="10.0.0.1")

    assert settings.port == 4000
    assert settings.host == "10.0.0.1"
    assert settings.nocodb_table_id == "from-env"


def test_default_config_json_is_optional_and_loaded(tmp_path: Path) -> None:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(
        json.dumps({"storage_backend": "nocodb"}),
        encoding="utf-8",
    )

    assert load_settings().storage_backend == "nocodb"


def test_nocodb_credentials_select_remote_backend(monkeypatch: MonkeyPatch) -> None:
    """Ensure a token and table id alone switch storage to NocoDB."""
    monkeypatch.setenv("NOCODB_API_TOKEN", "token-value")
    monkeypatch.setenv("NOCODB_TABLE_ID", "tbl_1")

    assert load_settings().storage_backend == "nocodb"
    assert load_settings(storage_backend="local").storage_backend == "local"


def test_partial_nocodb_credentials_keep_local_backend(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("NOCODB_TABLE_ID", "tbl_1")

    assert load_settings().storage_backend == "local"


def test_json_api_token_is_ignored(tmp_path: Path, caplog: LogCaptureFixture) -> None:
    """Ensure secrets in JSON configuration are dropped with a warning."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(
        json.dumps({"nocodb_api_token": "from-json", "nocodb_table_id": "tbl"}),
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="use_case_manager.settings"):
        settings = load_settings()

    assert settings.nocodb_api_token is None
    assert settings.nocodb_table_id == "tbl"
    assert "Ignoring secret key" in caplog.text


def test_missing_explicit_config_file_raises(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("UCM_CONFIG_JSON", str(tmp_path / "absent.json"))

    with pytest.raises(SettingsError):
        load_settings()


def test_invalid_json_raises(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    config_path = tmp_path / "broken.json"
    config_path.write_text("{oops", encoding="utf-8")
    monkeypatch.setenv("UCM_CONFIG_JSON", str(config_path))

    with pytest.raises(SettingsError):
        load_settings()


@pytest.mark.parametrize(
    "overrides",
    [
        {"nocodb_timeout_seconds": 0},
        {"port": 70000},
        {"storage_backend": "s3"},
    ],
)
def test_invalid_values_raise_settings_error(overrides: dict[str, object]) -> None:
    with pytest.raises(SettingsError):
        load_settings(**overrides)


def test_dotenv_values_fill_gaps_behind_environment(
    monkeypatch: MonkeyPatch,
    tmp_path: Path,
) -> None:
    """Ensure ``.env`` entries apply only where the process environment is silent."""
    (tmp_path / ".env").write_text(
        "NOCODB_TABLE_ID=tbl_dotenv\nUCM_HOST=0.0.0.0\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("UCM_HOST", "192.168.1.5")

    settings = load_settings()

    assert settings.nocodb_table_id == "tbl_dotenv"
    assert settings.host == "192.168.1.5"
