from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable
from urllib.parse import parse_qs, urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter

from omdb_proxy.api.services import metrics
from omdb_proxy.api.settings import Settings

API_KEY = "test-key"


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "log_level": "INFO",
        "log_file_path": None,
        "cors_origins_raw": "*",
        "cors_allow_credentials": False,
        "gzip_min_size": 0,
        "omdb_api_key": API_KEY,
        "omdb_base_url": "http://omdb.test/",
        "omdb_timeout_s": 2.0,
        "omdb_retry_total": 0,
        "omdb_retry_backoff_factor": 0.0,
        "omdb_user_agent": "omdb-proxy-tests",
    }
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


@dataclass(slots=True)
class SentRequest:
    url: str
    timeout: object

    @property
    def query(self) -> dict[str, list[str]]:
        return parse_qs(urlsplit(self.url).query)


# (status, payload) o una excepción a lanzar
Route = Callable[[SentRequest], object]


class FakeOmdbAdapter(BaseAdapter):
    """
    Transport adapter de requests con routing programable.

    Registra cada petición (URL ya codificada por requests) y devuelve un
    Response con el JSON del router, o lanza la excepción que devuelva.
    """

    def __init__(self, router: Route) -> None:
        super().__init__()
        self._router = router
        self.calls: list[SentRequest] = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):  # type: ignore[override]
        sent = SentRequest(url=str(request.url), timeout=timeout)
        self.calls.append(sent)

        outcome = self._router(sent)
        if isinstance(outcome, BaseException):
            raise outcome

        status, payload = outcome
        resp = requests.Response()
        resp.status_code = status
        resp.url = sent.url
        resp.request = request
        resp.encoding = "utf-8"
        if isinstance(payload, (bytes, str)):
            body = payload.encode("utf-8") if isinstance(payload, str) else payload
            resp.headers["Content-Type"] = "text/plain"
        else:
            body = json.dumps(payload).encode("utf-8")
            resp.headers["Content-Type"] = "application/json"
        resp._content = body
        return resp

    def close(self) -> None:
        return None


def make_session(router: Route) -> tuple[requests.Session, FakeOmdbAdapter]:
    adapter = FakeOmdbAdapter(router)
    session = requests.Session()
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session, adapter


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield
    metrics.reset()
