"""
Taxonomía cerrada de errores del proxy.

Cada tipo lleva su status HTTP y un mensaje público fijo. El detalle real
(excepción de requests, status de OMDb, ...) solo va al log del servidor:
el cliente nunca lo ve.
"""

from __future__ import annotations

from enum import Enum


class ProxyErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    UPSTREAM_ERROR = "upstream_error"


UPSTREAM_FAILURE_MESSAGE = "Failed to fetch data from OMDB API"


class ProxyError(Exception):
    kind: ProxyErrorKind = ProxyErrorKind.UPSTREAM_UNAVAILABLE
    status_code: int = 500
    public_message: str = UPSTREAM_FAILURE_MESSAGE

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.public_message)
        self.detail = detail

    def to_payload(self) -> dict[str, str]:
        return {"error": self.public_message}


class InvalidLookupError(ProxyError):
    kind = ProxyErrorKind.INVALID_INPUT
    status_code = 400
    public_message = "Missing query parameter: provide 'i' (IMDb ID) or 't' (title)"


class UpstreamUnavailableError(ProxyError):
    """Red, DNS, conexión rechazada, URL inválida o API key ausente."""

    kind = ProxyErrorKind.UPSTREAM_UNAVAILABLE
    status_code = 500
    public_message = UPSTREAM_FAILURE_MESSAGE


class UpstreamTimeoutError(ProxyError):
    kind = ProxyErrorKind.UPSTREAM_TIMEOUT
    status_code = 504
    public_message = "Timed out fetching data from OMDB API"


class UpstreamResponseError(ProxyError):
    """OMDb respondió, pero con status != 2xx o con un body que no es JSON."""

    kind = ProxyErrorKind.UPSTREAM_ERROR
    status_code = 502
    public_message = "Invalid response from OMDB API"
