"""Tests for settings loading and logging setup."""

from __future__ import annotations

import logging

import pytest

from file_converter.config import LoggingSettings, Settings, get_settings, reload_settings
from file_converter.logging import LOG_FILE_NAME, _dict_config, configure_logging, get_logger


def test_defaults():
    settings = Settings()

    assert settings.conversion.default_target_format == "png"
    assert settings.conversion.default_quality == 90
    assert settings.artifacts.retention_sec == 3600
    assert settings.admission.cooldown_minutes == {"critical": 60, "warning": 30, "starting": 5}


def test_yaml_file_and_overrides(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "service_name: from-yaml\nartifacts:\n  retention_sec: 60\n  handle_strategy: random\n",
        encoding="utf-8",
    )

    settings = Settings.from_source(config_file=str(path), environment="staging")

    assert settings.service_name == "from-yaml"
    assert settings.artifacts.retention_sec == 60
    assert settings.artifacts.handle_strategy == "random"
    assert settings.environment == "staging"


def test_missing_or_invalid_yaml(tmp_path):
    with pytest.raises(FileNotFoundError):
        Settings.load_yaml_config_file(tmp_path / "absent.yaml")

    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        Settings.load_yaml_config_file(path)


def test_env_overrides_nested_values(monkeypatch):
    monkeypatch.setenv("FC_ADMISSION__HEALTH_URL", "http://health.local/status")
    monkeypatch.setenv("FC_FILE_LIMITS__MAX_UPLOAD_SIZE_MB", "5")

    settings = Settings()

    assert settings.admission.health_url == "http://health.local/status"
    assert settings.file_limits.max_upload_size_mb == 5


def test_get_settings_reads_config_file_env(monkeypatch, tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("environment: from-env-file\n", encoding="utf-8")
    monkeypatch.setenv("FC_CONFIG_FILE", str(path))
    reload_settings()
    try:
        assert get_settings().environment == "from-env-file"
        assert get_settings() is get_settings()
    finally:
        reload_settings()


def test_configure_logging_writes_rotating_file(test_settings, tmp_path):
    configure_logging(test_settings.logging, force=True)
    logging.getLogger("file_converter.test").info("hello from test")

    log_file = tmp_path / "logs" / LOG_FILE_NAME
    assert log_file.exists()
    assert get_logger("file_converter.test") is not None


def test_time_rotation_uses_retention_days(tmp_path):
    handler = _dict_config(LoggingSettings(rotation="time", retention_days=3), tmp_path / "x.log")["handlers"]["file"]

    assert handler["class"] == "logging.handlers.TimedRotatingFileHandler"
    assert handler["backupCount"] == 3
