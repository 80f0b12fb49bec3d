"""Unit tests for middleware."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.middleware.request_id import MAX_REQUEST_ID_LENGTH, RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware


def _create_app_with_middleware(hsts: bool = False) -> FastAPI:
    """Create a minimal FastAPI app with security and request ID middleware."""
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware, hsts=hsts)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def _():
        return {"ok": True}

    return app


async def _get(app: FastAPI, **kwargs):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get("/test", **kwargs)


class TestSecurityHeadersMiddleware:
    """Tests for SecurityHeadersMiddleware."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "header,value",
        [
            ("x-content-type-options", "nosniff"),
            ("x-frame-options", "DENY"),
            ("referrer-policy", "strict-origin-when-cross-origin"),
        ],
    )
    async def test_adds_security_header(self, header: str, value: str):
        response = await _get(_create_app_with_middleware())

        assert response.headers[header] == value

    @pytest.mark.asyncio
    async def test_hsts_only_when_enabled(self):
        plain = await _get(_create_app_with_middleware())
        strict = await _get(_create_app_with_middleware(hsts=True))

        assert "strict-transport-security" not in plain.headers
        assert strict.headers["strict-transport-security"].startswith("max-age=")


class TestRequestIDMiddleware:
    """Tests for RequestIDMiddleware."""

    @pytest.mark.asyncio
    async def test_generates_request_id_when_not_provided(self):
        app = _create_app_with_middleware()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            r1 = await c.get("/test")
            r2 = await c.get("/test")

        assert r1.headers["x-request-id"]
        assert r1.headers["x-request-id"] != r2.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_propagates_existing_request_id(self):
        response = await _get(
            _create_app_with_middleware(), headers={"X-Request-ID": "custom-req-123"}
        )

        assert response.headers["x-request-id"] == "custom-req-123"

    @pytest.mark.asyncio
    async def test_replaces_oversized_request_id(self):
        oversized = "x" * (MAX_REQUEST_ID_LENGTH + 1)

        response = await _get(_create_app_with_middleware(), headers={"X-Request-ID": oversized})

        assert response.headers["x-request-id"] != oversized
        assert len(response.headers["x-request-id"]) == 36
