"""
File: main.py
Purpose: Application entrypoint for the Configuration API. Wires routers, logging, metrics,
         the configuration store and the rate limiter.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Mapping, Optional
from fastapi import FastAPI, Request
from .config import Settings, settings as default_settings
from .deps import client_ip
from .errors import register_error_handlers
from .instrumentation import setup_metrics, REQUESTS, LATENCY
from .limiter import FixedWindowRateLimiter
from .logging_setup import configure_logging
from .routers import health_router, metrics_router, config_router, admin_router
from .store import ConfigStore

_logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, environ: Optional[Mapping[str, str]] = None) -> FastAPI:
    """Build the app; configuration documents are read once, here."""
    if settings is None:
        settings = default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage app startup/shutdown lifecycle."""
        configure_logging(settings.LOG_LEVEL)
        _logger.info("Configuration API starting", extra={"environment": settings.ENV,
                                                          "version": settings.SERVICE_VERSION})
        yield
        _logger.info("Configuration API shutting down")

    app = FastAPI(
        title="Configuration API",
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = ConfigStore.load(
        environ,
        base_key=settings.APP_CONFIG_KEY,
        versions=settings.CONFIG_VERSIONS,
        environments=settings.CONFIG_ENVIRONMENTS,
    )
    app.state.limiter = FixedWindowRateLimiter(
        max_requests=settings.RL_REQUESTS,
        window_secs=settings.RL_WINDOW_SECS,
        max_clients=settings.RL_MAX_CLIENTS,
    )
    setup_metrics(app)
    register_error_handlers(app, production=settings.is_production)

    # Request timing + access log
    @app.middleware("http")
    async def prometheus_middleware(request: Request, call_next):
        """Track request metrics and latency histograms, labelled by route template."""
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        matched = request.scope.get("route")
        route = getattr(matched, "path", None) or "unmatched"
        LATENCY.labels(route=route).observe(elapsed)
        REQUESTS.labels(route=route, method=request.method, status=str(response.status_code)).inc()
        _logger.info("%s %s", request.method, request.url.path, extra={
            "route": route,
            "client_ip": client_ip(request, settings.TRUST_PROXY_HEADERS),
            "status": response.status_code,
            "duration_ms": round(elapsed * 1000, 2),
        })
        return response

    # Routers
    app.include_router(health_router, prefix="", tags=["system"])
    app.include_router(metrics_router, prefix="", tags=["system"])
    app.include_router(admin_router, prefix="/api", tags=["admin"])
    app.include_router(config_router, prefix="/api", tags=["config"])
    return app


app = create_app()
