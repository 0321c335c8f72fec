from __future__ import annotations

import logging
from pathlib import Path

import pytest

from config import MissingApiKeyError, SettingsError, load_settings
from services.open_exchange_rates_client import DEFAULT_BASE_URL


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("KEY", "OXR_BASE_URL", "OXR_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


def test_reads_key_from_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("KEY=from-file\nOXR_TIMEOUT=2.5\nUNRELATED=1\n", encoding="utf-8")

    settings = load_settings(env_file)

    assert settings.key == "from-file"
    assert settings.oxr_timeout == 2.5
    assert settings.oxr_base_url == DEFAULT_BASE_URL


def test_environment_overrides_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("KEY=from-file\n", encoding="utf-8")
    monkeypatch.setenv("KEY", "from-env")

    assert load_settings(env_file).key == "from-env"


def test_missing_env_file_is_only_logged(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("KEY", "from-env")

    with caplog.at_level(logging.WARNING, logger="config"):
        settings = load_settings(tmp_path / "missing.env")

    assert settings.key == "from-env"
    assert settings.oxr_timeout is None
    assert "does not exist" in caplog.text


def test_missing_key_raises(tmp_path: Path) -> None:
    with pytest.raises(MissingApiKeyError, match="no key"):
        load_settings(tmp_path / "missing.env")


def test_empty_key_counts_as_missing(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("KEY=\n", encoding="utf-8")

    with pytest.raises(MissingApiKeyError):
        load_settings(env_file)


def test_invalid_timeout_is_a_settings_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KEY", "abc")
    monkeypatch.setenv("OXR_TIMEOUT", "-1")

    with pytest.raises(SettingsError, match="OXR_TIMEOUT"):
        load_settings(tmp_path / "missing.env")
