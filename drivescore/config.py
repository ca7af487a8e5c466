"""Service configuration.

Loads from config.yaml if present, with environment variable overrides.
Environment variables use the pattern: DRIVESCORE_<SECTION>_<KEY> (uppercase).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

import yaml

from drivescore.core.thresholds import AnalysisThresholds


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    env: str = "dev"  # "dev" or "prod"


@dataclass
class StorageConfig:
    backend: str = "file"
    base_dir: str = "data/telemetry"


@dataclass
class FetchConfig:
    timeout_seconds: float = 10.0


@dataclass
class ReportsConfig:
    locale: str = "lv"  # "lv" or "en"
    active_window_seconds: float = 120.0


@dataclass
class LoggingConfig:
    level: str = "info"
    format: str = "console"  # "console" or "json"


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    analysis: AnalysisThresholds = field(default_factory=AnalysisThresholds)
    reports: ReportsConfig = field(default_factory=ReportsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _with_thresholds(config: AppConfig, **changes) -> None:
    # AnalysisThresholds is frozen; swap in a new instance.
    config.analysis = replace(config.analysis, **changes)


def _analysis_env_overrides() -> dict:
    """DRIVESCORE_ANALYSIS_<FIELD> for every threshold field."""
    mapping = {}
    for f in fields(AnalysisThresholds):
        cast = int if f.type in (int, "int") else float
        mapping[f"DRIVESCORE_ANALYSIS_{f.name.upper()}"] = (
            lambda v, name=f.name, cast=cast: (name, cast(v))
        )
    return mapping


def _apply_env_overrides(config: AppConfig) -> None:
    """Override config values from environment variables."""
    mapping = {
        "DRIVESCORE_SERVER_HOST": lambda v: setattr(config.server, "host", v),
        "DRIVESCORE_SERVER_PORT": lambda v: setattr(config.server, "port", int(v)),
        "DRIVESCORE_SERVER_ENV": lambda v: setattr(config.server, "env", v),
        "DRIVESCORE_STORAGE_BACKEND": lambda v: setattr(config.storage, "backend", v),
        "DRIVESCORE_STORAGE_BASE_DIR": lambda v: setattr(config.storage, "base_dir", v),
        "DRIVESCORE_FETCH_TIMEOUT": lambda v: setattr(config.fetch, "timeout_seconds", float(v)),
        "DRIVESCORE_REPORTS_LOCALE": lambda v: setattr(config.reports, "locale", v),
        "DRIVESCORE_REPORTS_ACTIVE_WINDOW": lambda v: setattr(config.reports, "active_window_seconds", float(v)),
        "DRIVESCORE_LOG_LEVEL": lambda v: setattr(config.logging, "level", v),
        "DRIVESCORE_LOG_FORMAT": lambda v: setattr(config.logging, "format", v),
    }
    for env_key, setter in mapping.items():
        val = os.environ.get(env_key)
        if val is not None:
            setter(val)

    for env_key, parse in _analysis_env_overrides().items():
        val = os.environ.get(env_key)
        if val is not None:
            name, value = parse(val)
            _with_thresholds(config, **{name: value})


def _apply_section(target: object, values: dict) -> None:
    for k, v in values.items():
        if hasattr(target, k):
            setattr(target, k, v)


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML file + environment overrides."""
    config = AppConfig()

    # Try to load YAML
    if config_path is None:
        config_path = Path("config.yaml")
    else:
        config_path = Path(config_path)

    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        for section in ("server", "storage", "fetch", "reports", "logging"):
            if section in raw:
                _apply_section(getattr(config, section), raw[section] or {})
        if "analysis" in raw:
            known = {f.name for f in fields(AnalysisThresholds)}
            changes = {k: v for k, v in (raw["analysis"] or {}).items() if k in known}
            _with_thresholds(config, **changes)

    # Environment overrides always win
    _apply_env_overrides(config)
    return config
