"""FastAPI application factory for the file conversion engine."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .admission import AdmissionGate
from .api.routes import router as api_router
from .config import Settings, get_settings
from .dispatcher import ConversionDispatcher
from .logging import configure_logging
from .monitoring import HealthProbe, ensure_metrics_server
from .plugins import REGISTRY, load_plugins_from_settings
from .service import ConversionService
from .storage import ArtifactStore


def build_service(settings: Settings) -> ConversionService:
    admission = settings.admission
    probe = HealthProbe(admission.health_url, timeout=admission.probe_timeout_sec) if admission.health_url else None
    gate = AdmissionGate(
        probe,
        probe_interval_sec=admission.probe_interval_sec,
        cooldown_minutes=admission.cooldown_minutes,
    )
    store = ArtifactStore(
        settings.artifacts.retention_sec,
        handle_strategy=settings.artifacts.handle_strategy,
    )
    return ConversionService(settings, store, gate, ConversionDispatcher(REGISTRY))


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.logging)
    load_plugins_from_settings(settings)

    if settings.monitoring.metrics_enabled:
        ensure_metrics_server(settings.monitoring.prometheus_port)

    app = FastAPI(
        title="File Conversion Engine",
        version=settings.api_version,
        docs_url=f"{settings.base_url}/docs",
        redoc_url=f"{settings.base_url}/redoc",
        openapi_url=f"{settings.base_url}/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.state.settings = settings
    app.state.service = build_service(settings)

    app.include_router(api_router, prefix=settings.base_url)

    @app.get("/healthz")
    async def root_health() -> dict[str, str]:
        return {"status": "ok"}

    return app
