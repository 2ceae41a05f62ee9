# LookupKey etiquetada + interfaz get/set + caché en memoria + locks por key
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from threading import RLock
from typing import Protocol


class LookupKind(str, Enum):
    """Tipo de búsqueda. El valor es el nombre del parámetro en OMDb."""

    IDENTIFIER = "i"
    TITLE = "t"


@dataclass(frozen=True)
class LookupKey:
    """
    Clave de caché etiquetada {kind, value}.

    - `value` se guarda tal cual (sin normalizar mayúsculas ni espacios).
    - IDENTIFIER "X" y TITLE "X" son claves distintas.
    """

    kind: LookupKind
    value: str

    def as_params(self) -> dict[str, str]:
        return {self.kind.value: self.value}

    def __str__(self) -> str:
        return f"{self.kind.value}={self.value}"


class LookupCache(Protocol):
    def get(self, key: LookupKey) -> object | None: ...

    def set(self, key: LookupKey, value: object) -> None: ...


class MemoryLookupCache:
    """
    Caché de proceso sin TTL ni límite de tamaño.

    Las entradas viven lo que viva la instancia (normalmente, el proceso).
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._entries: dict[LookupKey, object] = {}

    def get(self, key: LookupKey) -> object | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: LookupKey, value: object) -> None:
        with self._lock:
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class KeyLocks:
    """Un RLock por LookupKey (single-flight por clave)."""

    def __init__(self) -> None:
        self._registry_lock = RLock()
        self._locks: dict[LookupKey, RLock] = {}

    def lock_for(self, key: LookupKey) -> RLock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = RLock()
                self._locks[key] = lock
            return lock
