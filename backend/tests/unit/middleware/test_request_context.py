"""
Request Context Middleware Tests.

WHAT: Unit tests for the RequestContextMiddleware and the log filter that
reads its context.

WHY: Request ids tie together the log lines of one ticket operation across
the router, service and DAO layers. These tests ensure correct behavior for:
- Client IP extraction (direct and through proxies)
- Request ID generation and propagation
- Context availability during, and only during, a request
"""

import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request

from ticketdesk.core.logging import RequestIdFilter
from ticketdesk.middleware.request_context import (
    REQUEST_ID_HEADER,
    RequestContextMiddleware,
    get_client_ip,
    get_request_context,
)


def _make_request(headers: dict = None, client_host: str = None) -> Request:
    scope = {
        "type": "http",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": (client_host, 12345) if client_host else None,
    }
    return Request(scope)


class TestGetClientIp:
    """Tests for the get_client_ip function."""

    def test_x_real_ip_wins(self):
        request = _make_request(
            headers={"X-Real-IP": "192.168.1.100", "X-Forwarded-For": "203.0.113.50"},
            client_host="10.0.0.1",
        )
        assert get_client_ip(request) == "192.168.1.100"

    def test_first_forwarded_for_entry(self):
        request = _make_request(
            headers={"X-Forwarded-For": "203.0.113.50, 70.41.3.18, 150.172.238.178"},
            client_host="10.0.0.1",
        )
        assert get_client_ip(request) == "203.0.113.50"

    def test_direct_connection(self):
        assert get_client_ip(_make_request(client_host="192.168.1.50")) == "192.168.1.50"

    def test_unknown_fallback(self):
        assert get_client_ip(_make_request()) == "unknown"


def _build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.get("/context")
    async def read_context(request: Request):
        ctx = get_request_context()
        return {
            "request_id": ctx.request_id,
            "ip_address": ctx.ip_address,
            "path": ctx.path,
            "method": ctx.method,
            "same_as_state": request.state.context is ctx,
        }

    return app


class TestRequestContextMiddleware:
    def test_generates_request_id(self):
        client = TestClient(_build_app())

        response = client.get("/context")

        body = response.json()
        assert response.headers[REQUEST_ID_HEADER] == body["request_id"]
        assert len(body["request_id"]) == 36
        assert body["path"] == "/context"
        assert body["method"] == "GET"
        assert body["same_as_state"] is True

    def test_reuses_incoming_request_id(self):
        client = TestClient(_build_app())

        response = client.get("/context", headers={REQUEST_ID_HEADER: "upstream-42"})

        assert response.headers[REQUEST_ID_HEADER] == "upstream-42"
        assert response.json()["request_id"] == "upstream-42"

    def test_proxy_ip_recorded(self):
        client = TestClient(_build_app())

        response = client.get("/context", headers={"X-Forwarded-For": "198.51.100.7"})

        assert response.json()["ip_address"] == "198.51.100.7"

    def test_context_cleared_after_request(self):
        TestClient(_build_app()).get("/context")

        assert get_request_context() is None


class TestRequestIdFilter:
    def test_outside_request_uses_dash(self):
        record = logging.LogRecord("ticketdesk", logging.INFO, __file__, 1, "hello", None, None)

        assert RequestIdFilter().filter(record) is True
        assert record.request_id == "-"
