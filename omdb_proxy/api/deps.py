from __future__ import annotations

from omdb_proxy.api.caching.lookup_cache import MemoryLookupCache
from omdb_proxy.api.services.lookup import LookupService
from omdb_proxy.api.services.omdb import OmdbClient
from omdb_proxy.api.settings import Settings

_SETTINGS = Settings.from_env()
_LOOKUP_CACHE = MemoryLookupCache()
_OMDB_CLIENT = OmdbClient(_SETTINGS)
_LOOKUP_SERVICE = LookupService(cache=_LOOKUP_CACHE, client=_OMDB_CLIENT)


def get_settings() -> Settings:
    return _SETTINGS


def get_lookup_cache() -> MemoryLookupCache:
    return _LOOKUP_CACHE


def get_omdb_client() -> OmdbClient:
    return _OMDB_CLIENT


def get_lookup_service() -> LookupService:
    return _LOOKUP_SERVICE
