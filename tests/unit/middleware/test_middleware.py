"""Unit tests for middleware."""

import pytest
from structlog.testing import capture_logs
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from httpx import ASGITransport, AsyncClient

from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SECURITY_HEADERS, SecurityHeadersMiddleware


def _create_app_with_middleware() -> FastAPI:
    """Minimal app stacked the way the real one is (request ID outermost)."""
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/members")
    async def members() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/framed")
    async def framed() -> PlainTextResponse:
        return PlainTextResponse("ok", headers={"X-Frame-Options": "SAMEORIGIN"})

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    return app


async def _get(path: str, **kwargs):  # type: ignore[no-untyped-def]
    transport = ASGITransport(app=_create_app_with_middleware())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path, **kwargs)


class TestSecurityHeadersMiddleware:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(("name", "value"), sorted(SECURITY_HEADERS.items()))
    async def test_adds_header(self, name: str, value: str) -> None:
        response = await _get("/members")

        assert response.headers[name] == value

    @pytest.mark.asyncio
    async def test_keeps_header_set_by_route(self) -> None:
        response = await _get("/framed")

        assert response.headers["x-frame-options"] == "SAMEORIGIN"


class TestRequestIDMiddleware:
    @pytest.mark.asyncio
    async def test_generates_request_id_when_not_provided(self) -> None:
        transport = ASGITransport(app=_create_app_with_middleware())
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            first = await c.get("/members")
            second = await c.get("/members")

        assert len(first.headers["x-request-id"]) == 36
        assert first.headers["x-request-id"] != second.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_propagates_well_formed_request_id(self) -> None:
        response = await _get("/members", headers={"X-Request-ID": "web-4f2a.1"})

        assert response.headers["x-request-id"] == "web-4f2a.1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("supplied", ["bad id with spaces", "x" * 129, "a;b"])
    async def test_replaces_malformed_request_id(self, supplied: str) -> None:
        response = await _get("/members", headers={"X-Request-ID": supplied})

        assert response.headers["x-request-id"] != supplied
        assert len(response.headers["x-request-id"]) == 36


class TestRequestLoggingMiddleware:
    @pytest.mark.asyncio
    async def test_logs_completed_request(self) -> None:
        with capture_logs() as logs:
            await _get("/members", headers={"X-Request-ID": "req-1"})

        completed = [e for e in logs if e["event"] == "request_completed"]
        assert len(completed) == 1
        assert completed[0]["status_code"] == 200
        assert completed[0]["log_level"] == "info"

    @pytest.mark.asyncio
    async def test_health_probes_are_not_logged(self) -> None:
        with capture_logs() as logs:
            await _get("/health")

        assert not [e for e in logs if e["event"] == "request_completed"]
