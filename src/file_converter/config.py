"""Centralized settings and configuration loading utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FileLimitSettings(BaseModel):
    max_upload_size_mb: int = Field(100, ge=1)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    log_dir: str = "./logs"
    rotation: str = "size"
    max_log_file_size_mb: int = 100
    backup_count: int = 7
    retention_days: int = 30


class MonitoringSettings(BaseModel):
    metrics_enabled: bool = True
    prometheus_port: int = 9091


class ConversionSettings(BaseModel):
    default_target_format: str = "png"
    default_quality: int = Field(90, ge=1, le=100)
    max_quality: int = Field(100, ge=1, le=100)


class ArtifactSettings(BaseModel):
    retention_sec: int = Field(3600, ge=1)
    # "name": reversible encoding of the display name, "random": opaque token
    handle_strategy: Literal["name", "random"] = "name"
    max_download_name_length: int = Field(100, ge=8)


class AdmissionSettings(BaseModel):
    health_url: Optional[str] = None
    probe_timeout_sec: float = 2.0
    probe_interval_sec: int = Field(30, ge=0)
    cooldown_minutes: Dict[str, int] = Field(
        default_factory=lambda: {"critical": 60, "warning": 30, "starting": 5}
    )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FC_", env_nested_delimiter="__", extra="allow")

    service_name: str = "file-conversion-engine"
    environment: str = "dev"
    api_version: str = "v1"
    base_url: str = "/api/v1"

    file_limits: FileLimitSettings = FileLimitSettings()
    logging: LoggingSettings = LoggingSettings()
    monitoring: MonitoringSettings = MonitoringSettings()
    conversion: ConversionSettings = ConversionSettings()
    artifacts: ArtifactSettings = ArtifactSettings()
    admission: AdmissionSettings = AdmissionSettings()
    plugin_modules: list[str] = Field(default_factory=list)
    plugin_modules_file: str | None = "./config/plugins.yaml"

    @staticmethod
    def load_yaml_config_file(file_path: str | Path | None) -> Dict[str, Any]:
        if not file_path:
            return {}
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        import yaml

        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration YAML must produce a mapping")
        return data

    @classmethod
    def from_source(cls, *, config_file: str | None = None, **overrides: Any) -> "Settings":
        base_data = cls.load_yaml_config_file(config_file)
        base_data.update(overrides)
        return cls(**base_data)


@lru_cache
def get_settings() -> Settings:
    cfg_file = os.getenv("FC_CONFIG_FILE")
    if cfg_file:
        return Settings.from_source(config_file=cfg_file)

    default_path = Path.cwd() / "config" / "settings.yaml"
    if default_path.exists():
        return Settings.from_source(config_file=str(default_path))

    return Settings()


def reload_settings() -> None:
    get_settings.cache_clear()


def settings_dependency() -> Settings:
    return get_settings()
