# resolución de clave + cache-first + single-flight
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from omdb_proxy.api.caching.lookup_cache import KeyLocks, LookupCache, LookupKey, LookupKind
from omdb_proxy.api.errors import InvalidLookupError
from omdb_proxy.api.services import metrics


class UpstreamClient(Protocol):
    def fetch(self, key: LookupKey) -> object: ...


@dataclass(frozen=True)
class LookupResult:
    body: object
    cached: bool


def resolve_key(*, identifier: str | None, title: str | None) -> LookupKey:
    """
    Prioridad: `identifier` si viene y no está vacío; si no, `title`.

    Sin ninguno de los dos -> InvalidLookupError (400). No se normaliza nada:
    "Matrix" y "matrix" son claves distintas.
    """
    if identifier:
        return LookupKey(LookupKind.IDENTIFIER, identifier)
    if title:
        return LookupKey(LookupKind.TITLE, title)
    metrics.inc("lookup_invalid_total", 1)
    raise InvalidLookupError("request without 'i' or 't'")


class LookupService:
    """
    Proxy de lookups OMDb con caché de proceso.

    - Hit: se devuelve lo cacheado sin llamar a OMDb (aunque sea un
      `{"Response": "False", ...}` que OMDb devolvió con 200).
    - Miss: lock por clave + re-check, así peticiones concurrentes a la misma
      clave comparten una única llamada a OMDb.
    - Solo se cachean respuestas correctas; los errores se propagan.
    """

    def __init__(
        self,
        *,
        cache: LookupCache,
        client: UpstreamClient,
        locks: KeyLocks | None = None,
    ) -> None:
        self._cache = cache
        self._client = client
        self._locks = locks if locks is not None else KeyLocks()

    @property
    def cache(self) -> LookupCache:
        return self._cache

    def handle(self, *, identifier: str | None, title: str | None) -> LookupResult:
        key = resolve_key(identifier=identifier, title=title)
        return self.lookup(key)

    def lookup(self, key: LookupKey) -> LookupResult:
        cached = self._cache.get(key)
        if cached is not None:
            metrics.inc("lookup_cache_hit_total", 1)
            return LookupResult(body=cached, cached=True)

        with self._locks.lock_for(key):
            # otra request pudo resolver la misma clave mientras esperábamos
            cached = self._cache.get(key)
            if cached is not None:
                metrics.inc("lookup_singleflight_shared_total", 1)
                return LookupResult(body=cached, cached=True)

            metrics.inc("lookup_cache_miss_total", 1)
            body = self._client.fetch(key)
            self._cache.set(key, body)
            return LookupResult(body=body, cached=False)
