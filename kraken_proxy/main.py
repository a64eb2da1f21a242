"""Kraken Proxy - Main Application."""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kraken_proxy.api.auth import router as auth_router
from kraken_proxy.api.kraken import router as kraken_router
from kraken_proxy.dependencies import build_container
from kraken_proxy.logging_hardening import setup_logging
from kraken_proxy.middleware.error_boundary import UnexpectedErrorMiddleware, register_exception_handlers
from kraken_proxy.routers import health
from kraken_proxy.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Kraken Proxy",
        description="Stateless credential proxy for the Kraken private API",
        version="0.1.0"
    )
    app.state.container = build_container(settings)

    # Added first so CORSMiddleware wraps it
    app.add_middleware(UnexpectedErrorMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"]
    )
    register_exception_handlers(app)

    # Mount routers
    app.include_router(auth_router.router, tags=["Auth"])
    app.include_router(kraken_router.router, tags=["Kraken"])
    app.include_router(health.router, tags=["Health"])

    logger.info(f"Kraken Proxy configured (mode={settings.mode}, port={settings.port})")
    return app


app = create_app()
