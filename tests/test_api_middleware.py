import asyncio
import json

from conftest import make_settings
from fastapi import Request, Response

from omdb_proxy.api.errors import InvalidLookupError, UpstreamUnavailableError
from omdb_proxy.api.middleware.errors import build_exception_handler, build_proxy_error_handler
from omdb_proxy.api.middleware.request_id import build_request_id_middleware


def _make_request(headers, *, path="/", query=b""):
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "method": "GET",
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": query,
        "headers": headers,
        "client": ("127.0.0.1", 1234),
        "server": ("testserver", 80),
        "scheme": "http",
        "http_version": "1.1",
    }

    async def receive():
        return {"type": "http.request", "body": b""}

    return Request(scope, receive)


class DummyLogger:
    def __init__(self):
        self.records = []

    def info(self, msg, *args, **kwargs):
        self.records.append(("info", msg, args, kwargs))

    def error(self, msg, *args, **kwargs):
        self.records.append(("error", msg, args, kwargs))

    def exception(self, msg, *args, **kwargs):
        self.records.append(("exception", msg, args, kwargs))


def test_request_id_middleware_sets_header_and_logs_line(monkeypatch):
    from omdb_proxy.api.middleware import request_id as mod

    logger = DummyLogger()
    captured_metrics = []
    monkeypatch.setattr(mod, "configure_logging", lambda settings: logger)
    monkeypatch.setattr(mod.metrics, "inc", lambda name, value=1: captured_metrics.append((name, value)))

    middleware = build_request_id_middleware(make_settings())
    request = _make_request([(b"x-request-id", b"req-123")], query=b"t=Alien")

    async def call_next(req):
        assert req.state.request_id == "req-123"
        return Response(status_code=201)

    response = asyncio.run(middleware(request, call_next))

    assert response.status_code == 201
    assert response.headers["X-Request-ID"] == "req-123"
    assert ("http_requests_total", 1) in captured_metrics

    level, msg, args, kwargs = logger.records[-1]
    assert level == "info"
    assert msg % args == f"GET /?t=Alien 201 {kwargs['extra']['duration_ms']}ms"
    assert kwargs["extra"]["status"] == 201
    assert kwargs["extra"]["request_id"] == "req-123"


def test_request_id_middleware_generates_id(monkeypatch):
    from omdb_proxy.api.middleware import request_id as mod

    monkeypatch.setattr(mod, "configure_logging", lambda settings: DummyLogger())
    middleware = build_request_id_middleware(make_settings())

    async def call_next(req):
        return Response(status_code=200)

    response = asyncio.run(middleware(_make_request([]), call_next))

    assert len(response.headers["X-Request-ID"]) == 32


def test_proxy_error_handler_hides_detail(monkeypatch):
    from omdb_proxy.api.middleware import errors as mod

    logger = DummyLogger()
    captured_metrics = []
    monkeypatch.setattr(mod, "configure_logging", lambda settings: logger)
    monkeypatch.setattr(mod.metrics, "inc", lambda name, value=1: captured_metrics.append((name, value)))

    handler = build_proxy_error_handler(make_settings())
    request = _make_request([])
    request.state.request_id = "req-xyz"

    response = asyncio.run(handler(request, UpstreamUnavailableError("dns failure for omdb.test")))

    assert response.status_code == 500
    assert json.loads(response.body.decode("utf-8")) == {"error": "Failed to fetch data from OMDB API"}
    assert ("http_errors_5xx_total", 1) in captured_metrics

    level, _msg, args, kwargs = logger.records[-1]
    assert level == "error"
    assert "dns failure for omdb.test" in args
    assert kwargs["extra"]["error_kind"] == "upstream_unavailable"
    assert "exc_info" not in kwargs
    assert kwargs["extra"]["request_id"] == "req-xyz"


def test_proxy_error_handler_invalid_input_is_400(monkeypatch):
    from omdb_proxy.api.middleware import errors as mod

    logger = DummyLogger()
    captured_metrics = []
    monkeypatch.setattr(mod, "configure_logging", lambda settings: logger)
    monkeypatch.setattr(mod.metrics, "inc", lambda name, value=1: captured_metrics.append((name, value)))

    handler = build_proxy_error_handler(make_settings())
    response = asyncio.run(handler(_make_request([]), InvalidLookupError("no params")))

    assert response.status_code == 400
    assert json.loads(response.body.decode("utf-8")) == {"error": InvalidLookupError.public_message}
    assert captured_metrics == []
    assert logger.records[-1][0] == "info"


def test_exception_handler_includes_request_id(monkeypatch):
    from omdb_proxy.api.middleware import errors as mod

    logger = DummyLogger()
    captured_metrics = []
    monkeypatch.setattr(mod, "configure_logging", lambda settings: logger)
    monkeypatch.setattr(mod.metrics, "inc", lambda name, value=1: captured_metrics.append((name, value)))

    handler = build_exception_handler(make_settings())
    request = _make_request([])
    request.state.request_id = "req-xyz"

    response = asyncio.run(handler(request, RuntimeError("boom")))

    payload = json.loads(response.body.decode("utf-8"))
    assert response.status_code == 500
    assert payload["detail"] == "Internal Server Error"
    assert payload["request_id"] == "req-xyz"
    assert response.headers["X-Request-ID"] == "req-xyz"
    assert isinstance(payload["error_id"], str) and payload["error_id"]
    assert ("http_errors_5xx_total", 1) in captured_metrics
    assert logger.records[-1][0] == "exception"
