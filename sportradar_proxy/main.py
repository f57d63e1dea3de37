# sportradar_proxy/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings, get_settings
from .core.errors import register_error_handlers
from .core.logging import configure_logging
from .routers import data, health, proxy
from .services.proxy import ProxyService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, service: Optional[ProxyService] = None) -> FastAPI:
    settings = settings or get_settings()
    service = service or ProxyService.from_settings(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if not service.has_credential:
            logger.warning("SPORTRADAR_API_KEY is not set; every proxied request will fail")
        yield
        service.close()

    app = FastAPI(title="Sportradar Proxy", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.proxy = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Cache"],
    )
    register_error_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(proxy.router)
    app.include_router(data.router)

    @app.get("/")
    def root():
        return {"service": "sportradar-proxy"}

    return app


configure_logging(get_settings().log_level)
app = create_app()
