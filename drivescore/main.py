"""drivescore service — main entry point.

This is the only file that knows about concrete implementations.
It wires together the core, storage, and API layers.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from drivescore.api.monitoring import router as monitoring_router
from drivescore.api.reports import router as reports_router
from drivescore.api.telemetry import router as telemetry_router
from drivescore.config import AppConfig, load_config
from drivescore.core.access import AccessPolicy, OpenAccessPolicy
from drivescore.core.service import ReportService
from drivescore.core.stats import ServiceStats
from drivescore.storage.file_storage import FileTelemetryStore

log = structlog.get_logger()

# Module-level singletons (set during startup)
_service: ReportService | None = None
_stats: ServiceStats | None = None
_config: AppConfig | None = None
_access: AccessPolicy | None = None


def get_service() -> ReportService:
    assert _service is not None, "Server not initialized"
    return _service


def get_stats() -> ServiceStats:
    assert _stats is not None, "Server not initialized"
    return _stats


def get_config() -> AppConfig:
    assert _config is not None, "Server not initialized"
    return _config


def get_access_policy() -> AccessPolicy:
    assert _access is not None, "Server not initialized"
    return _access


def _setup_logging(config: AppConfig) -> None:
    """Configure structlog based on the logging config."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.logging.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.logging.level.upper()),
        ),
    )


def build_service(config: AppConfig, stats: ServiceStats) -> ReportService:
    if config.storage.backend != "file":
        raise ValueError(f"unsupported storage backend: {config.storage.backend!r}")
    store = FileTelemetryStore(base_dir=config.storage.base_dir)
    return ReportService(
        store=store,
        stats=stats,
        thresholds=config.analysis,
        locale=config.reports.locale,
        fetch_timeout=config.fetch.timeout_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    global _service, _stats, _config, _access

    _config = load_config()
    _setup_logging(_config)

    log.info("server_starting",
             env=_config.server.env,
             storage_dir=_config.storage.base_dir,
             locale=_config.reports.locale)

    _stats = ServiceStats(active_window_seconds=_config.reports.active_window_seconds)
    _service = build_service(_config, _stats)
    _access = OpenAccessPolicy()

    log.info("server_started",
             host=_config.server.host,
             port=_config.server.port)

    yield

    log.info("server_stopped")


app = FastAPI(
    title="drivescore",
    description="Driving behavior reports from vehicle telemetry",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(telemetry_router)
app.include_router(reports_router)
app.include_router(monitoring_router)
