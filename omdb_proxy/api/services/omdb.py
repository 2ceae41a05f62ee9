from __future__ import annotations

"""
omdb_proxy/api/services/omdb.py

Cliente OMDb (una petición GET por llamada, sin caché propia).

- requests.Session compartida (pooling) + Retry de urllib3 configurable.
- Timeout siempre acotado: un OMDb colgado no retiene la request indefinidamente.
- Params como mapping: requests los codifica (títulos con espacios, `&`, `#`...).
- Clasifica los fallos en la taxonomía de omdb_proxy.api.errors.
"""

import logging

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException, Timeout
from urllib3.util.retry import Retry

from omdb_proxy.api.caching.lookup_cache import LookupKey
from omdb_proxy.api.errors import (
    UpstreamResponseError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from omdb_proxy.api.logging_config import LOGGER_NAME
from omdb_proxy.api.services import metrics
from omdb_proxy.api.settings import Settings

logger = logging.getLogger(f"{LOGGER_NAME}.omdb")


def _redact(text: str, secret: str) -> str:
    # las excepciones de urllib3 incluyen la URL completa (con apikey); la causa
    # original no se encadena (from None) para que ningún traceback la arrastre
    return text.replace(secret, "***") if secret else text


def build_session(settings: Settings) -> requests.Session:
    """
    Session con retries y cabeceras por defecto.

    Retry gestiona 429/5xx/conexión best-effort. Con OMDB_HTTP_RETRY_TOTAL=0
    (default) cada lookup es exactamente una petición.
    """
    session = requests.Session()

    retries = Retry(
        total=settings.omdb_retry_total,
        backoff_factor=settings.omdb_retry_backoff_factor,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    session.headers.update(
        {
            "User-Agent": settings.omdb_user_agent,
            "Accept": "application/json,text/plain,*/*",
        }
    )
    return session


class OmdbClient:
    def __init__(self, settings: Settings, *, session: requests.Session | None = None) -> None:
        self._settings = settings
        self._session = session if session is not None else build_session(settings)

    @property
    def session(self) -> requests.Session:
        return self._session

    def fetch(self, key: LookupKey) -> object:
        """
        GET a OMDb para `key` y devuelve el JSON decodificado (opaco).

        Raises:
          - UpstreamUnavailableError: sin API key, o fallo de red/DNS/URL.
          - UpstreamTimeoutError: timeout de conexión o de lectura.
          - UpstreamResponseError: status != 2xx o body no-JSON.
        """
        api_key = self._settings.omdb_api_key
        if not api_key:
            metrics.inc("omdb_failures_total", 1)
            raise UpstreamUnavailableError("OMDB_API_KEY no configurada; no se llama a OMDb")

        params = key.as_params()
        params["apikey"] = api_key

        metrics.inc("omdb_requests_total", 1)
        logger.debug("omdb_request lookup=%s", key)

        try:
            resp = self._session.get(
                self._settings.omdb_base_url,
                params=params,
                timeout=self._settings.omdb_timeout_s,
            )
        except Timeout as exc:
            metrics.inc("omdb_failures_total", 1)
            raise UpstreamTimeoutError(
                _redact(f"OMDb timeout after {self._settings.omdb_timeout_s:g}s ({key}): {exc!r}", api_key)
            ) from None
        except RequestException as exc:
            metrics.inc("omdb_failures_total", 1)
            raise UpstreamUnavailableError(_redact(f"OMDb request failed ({key}): {exc!r}", api_key)) from None

        if not 200 <= resp.status_code < 300:
            metrics.inc("omdb_failures_total", 1)
            raise UpstreamResponseError(f"OMDb status {resp.status_code} ({key})")

        try:
            return resp.json()
        except ValueError as exc:
            metrics.inc("omdb_failures_total", 1)
            raise UpstreamResponseError(f"OMDb invalid JSON ({key}): {exc!r}") from exc
