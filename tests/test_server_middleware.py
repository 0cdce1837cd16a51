import asyncio
import json
import logging

from fastapi import Request, Response

from server.api.middleware.errors import build_exception_handler
from server.api.middleware.request_id import build_request_id_middleware
from server.api.settings import Settings


def _make_request(headers, path="/process"):
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "method": "POST",
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": b"",
        "headers": headers,
        "client": ("127.0.0.1", 1234),
        "server": ("testserver", 80),
        "scheme": "http",
        "http_version": "1.1",
    }

    async def receive():
        return {"type": "http.request", "body": b""}

    return Request(scope, receive)


def _settings():
    return Settings(log_level="INFO", api_host="127.0.0.1", api_port=8080, api_reload=False)


def test_request_id_middleware_sets_header(monkeypatch):
    from server.api.middleware import request_id as mod

    captured = {"log": None, "metrics": []}

    class DummyLogger:
        def log(self, level, msg, extra=None):
            captured["log"] = (level, msg, extra)

    monkeypatch.setattr(mod, "configure_logging", lambda settings: DummyLogger())
    monkeypatch.setattr(mod.metrics, "inc", lambda name, value=1: captured["metrics"].append((name, value)))

    middleware = build_request_id_middleware(_settings())

    request = _make_request([(b"x-request-id", b"req-123")])

    async def call_next(req):
        assert req.state.request_id == "req-123"
        return Response(status_code=201)

    response = asyncio.run(middleware(request, call_next))

    assert response.status_code == 201
    assert response.headers["X-Request-ID"] == "req-123"
    assert ("http_requests_total", 1) in captured["metrics"]
    assert captured["log"] is not None
    assert captured["log"][0] == logging.INFO
    assert captured["log"][2]["status"] == 201


def test_request_id_middleware_probes_log_at_debug(monkeypatch):
    from server.api.middleware import request_id as mod

    levels = []

    class DummyLogger:
        def log(self, level, msg, extra=None):
            levels.append(level)

    monkeypatch.setattr(mod, "configure_logging", lambda settings: DummyLogger())
    monkeypatch.setattr(mod.metrics, "inc", lambda name, value=1: None)

    middleware = build_request_id_middleware(_settings())

    async def call_next(req):
        return Response(status_code=200)

    response = asyncio.run(middleware(_make_request([], path="/health"), call_next))

    assert levels == [logging.DEBUG]
    assert response.headers["X-Request-ID"]


def test_exception_handler_includes_request_id(monkeypatch):
    from server.api.middleware import errors as mod

    captured = {"exc": None, "metrics": []}

    class DummyLogger:
        def exception(self, msg, extra=None):
            captured["exc"] = (msg, extra)

    monkeypatch.setattr(mod, "configure_logging", lambda settings: DummyLogger())
    monkeypatch.setattr(mod.metrics, "inc", lambda name, value=1: captured["metrics"].append((name, value)))

    handler = build_exception_handler(_settings())

    request = _make_request([])
    request.state.request_id = "req-xyz"

    response = asyncio.run(handler(request, RuntimeError("boom")))

    payload = json.loads(response.body.decode("utf-8"))
    assert response.status_code == 500
    assert payload["detail"] == "Internal Server Error"
    assert payload["request_id"] == "req-xyz"
    assert isinstance(payload["error_id"], str) and payload["error_id"]
    assert ("http_errors_5xx_total", 1) in captured["metrics"]
    assert captured["exc"] is not None
