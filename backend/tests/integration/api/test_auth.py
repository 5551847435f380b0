"""
Authentication API Integration Tests.

WHAT: Login, bearer-token enforcement and the shared error envelope.

WHY: Every route depends on get_identity; a missing or bad token must be
a uniform 401 before any ticket logic runs.
"""

import pytest
from httpx import AsyncClient

from ticketdesk.core.auth import create_access_token
from tests.factories import DEFAULT_PASSWORD


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_returns_token(self, client: AsyncClient, support):
        response = await client.post(
            "/api/auth/login",
            json={"email": "Support@Example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0
        assert data["user"]["id"] == support.id
        assert data["user"]["role"] == "SUPPORT"
        assert "hashed_password" not in data["user"]

    @pytest.mark.asyncio
    async def test_issued_token_works(self, client: AsyncClient, user):
        login = await client.post(
            "/api/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD}
        )
        token = login.json()["access_token"]

        response = await client.get("/api/tickets", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_password(self, client: AsyncClient, user):
        response = await client.post(
            "/api/auth/login", json={"email": user.email, "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password."

    @pytest.mark.asyncio
    async def test_unknown_email_same_answer(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password."

    @pytest.mark.asyncio
    async def test_malformed_body(self, client: AsyncClient):
        response = await client.post("/api/auth/login", json={"email": "not-an-email"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "ValidationError"
        fields = {e["field"] for e in body["details"]["errors"]}
        assert "body.email" in fields
        assert "body.password" in fields


class TestBearerToken:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/api/tickets"),
            ("POST", "/api/tickets"),
            ("GET", "/api/users"),
            ("PATCH", "/api/comments/1"),
            ("DELETE", "/api/tickets/1"),
        ],
    )
    async def test_missing_token(self, client: AsyncClient, method, path):
        response = await client.request(method, path)

        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "AuthenticationError"
        assert body["status_code"] == 401
        assert body["message"] == "Not authenticated"

    @pytest.mark.asyncio
    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get(
            "/api/tickets", headers={"Authorization": "Bearer not.a.token"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_with_unknown_role(self, client: AsyncClient):
        token = create_access_token({"sub": "1", "email": "x@example.com", "role": "ADMIN"})

        response = await client.get("/api/tickets", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestPlumbing:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_request_id_header(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_envelope(self, client: AsyncClient):
        response = await client.get("/api/nowhere")

        assert response.status_code == 404
        assert response.json()["error"] == "HTTPException"
