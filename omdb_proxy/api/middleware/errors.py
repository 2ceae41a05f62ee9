# exception handlers (ProxyError -> {"error": ...}; resto -> error_id)
from __future__ import annotations

import uuid
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from omdb_proxy.api.errors import ProxyError, ProxyErrorKind
from omdb_proxy.api.logging_config import configure_logging
from omdb_proxy.api.services import metrics
from omdb_proxy.api.settings import Settings


def build_proxy_error_handler(settings: Settings):
    logger = configure_logging(settings)

    async def handler(request: Request, exc: ProxyError) -> JSONResponse:
        req_id = getattr(request.state, "request_id", None)
        extra = {
            "request_id": req_id,
            "path": request.url.path,
            "error_kind": exc.kind.value,
        }

        if exc.kind is ProxyErrorKind.INVALID_INPUT:
            logger.info("invalid_lookup: %s", exc.detail, extra=extra)
        else:
            # detalle (ya sin API key) solo en el log; sin traceback
            logger.error(
                "Error fetching data from OMDB API (%s): %s",
                exc.kind.value,
                exc.detail,
                extra=extra,
            )

        if exc.status_code >= 500:
            metrics.inc("http_errors_5xx_total", 1)

        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    return handler


def build_exception_handler(settings: Settings):
    logger = configure_logging(settings)

    async def handler(request: Request, exc: Exception) -> JSONResponse:
        error_id = uuid.uuid4().hex
        req_id = getattr(request.state, "request_id", None)

        logger.exception(
            "unhandled_exception",
            extra={"error_id": error_id, "request_id": req_id, "path": request.url.path},
        )
        metrics.inc("http_errors_5xx_total", 1)

        payload: dict[str, Any] = {"detail": "Internal Server Error", "error_id": error_id}
        headers: dict[str, str] = {}
        if isinstance(req_id, str) and req_id:
            payload["request_id"] = req_id
            # ServerErrorMiddleware responde por fuera del middleware de request id
            headers["X-Request-ID"] = req_id

        return JSONResponse(status_code=500, content=payload, headers=headers)

    return handler
