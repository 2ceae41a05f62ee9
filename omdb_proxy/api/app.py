from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from omdb_proxy.api.deps import get_settings
from omdb_proxy.api.errors import ProxyError
from omdb_proxy.api.logging_config import configure_logging
from omdb_proxy.api.middleware import (
    build_exception_handler,
    build_proxy_error_handler,
    build_request_id_middleware,
)
from omdb_proxy.api.routers.health import router as health_router
from omdb_proxy.api.routers.lookup import router as lookup_router
from omdb_proxy.api.settings import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logger = configure_logging(settings)

    app = FastAPI(title="OMDb Lookup Proxy", version="1.0.0")

    app.add_middleware(GZipMiddleware, minimum_size=max(0, settings.gzip_min_size))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.middleware("http")(build_request_id_middleware(settings))
    app.add_exception_handler(ProxyError, build_proxy_error_handler(settings))
    app.add_exception_handler(Exception, build_exception_handler(settings))

    app.include_router(health_router)
    app.include_router(lookup_router)

    if not settings.has_api_key:
        logger.warning("OMDB_API_KEY no configurada: los lookups devolverán 500 hasta que se defina")

    return app


app = create_app()
