from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from omdb_proxy.api.deps import get_lookup_service
from omdb_proxy.api.services.lookup import LookupService

router = APIRouter()


@router.get("/")
def lookup(
    i: str | None = Query(None, description="IMDb ID (p.ej. tt1375666)"),
    t: str | None = Query(None, description="Título exacto; se ignora si viene `i`"),
    service: LookupService = Depends(get_lookup_service),
) -> JSONResponse:
    # def (no async): FastAPI lo ejecuta en su threadpool y la espera a OMDb
    # no bloquea el event loop
    result = service.handle(identifier=i, title=t)
    return JSONResponse(
        content=result.body,
        headers={"X-Cache": "HIT" if result.cached else "MISS"},
    )
