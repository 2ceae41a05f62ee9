from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response

from omdb_proxy.api.caching.lookup_cache import MemoryLookupCache
from omdb_proxy.api.deps import get_lookup_cache, get_settings
from omdb_proxy.api.services import metrics
from omdb_proxy.api.settings import Settings

router = APIRouter()


@router.get("/health")
def health() -> dict[str, Any]:
    return {"ok": True, "ts": datetime.now(timezone.utc).isoformat()}


@router.get("/ready")
def ready(
    settings: Settings = Depends(get_settings),
    cache: MemoryLookupCache = Depends(get_lookup_cache),
) -> dict[str, Any]:
    """
    Readiness:
    - sin API key cada lookup acabaría en 500, así que no estamos listos.
    - no llama a OMDb (eso gastaría cuota en cada probe).
    """
    issues: dict[str, str] = {}
    if not settings.has_api_key:
        issues["omdb_api_key"] = "missing: set OMDB_API_KEY"

    if issues:
        raise HTTPException(status_code=503, detail={"ready": False, "issues": issues})

    return {
        "ready": True,
        "cache_entries": len(cache),
        "ts": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/metrics")
def metrics_endpoint() -> Response:
    body = metrics.render_prometheus()
    return Response(content=body, media_type="text/plain; version=0.0.4")
