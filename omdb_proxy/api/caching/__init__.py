from __future__ import annotations

from omdb_proxy.api.caching.lookup_cache import (
    KeyLocks,
    LookupCache,
    LookupKey,
    LookupKind,
    MemoryLookupCache,
)

__all__ = ["KeyLocks", "LookupCache", "LookupKey", "LookupKind", "MemoryLookupCache"]
