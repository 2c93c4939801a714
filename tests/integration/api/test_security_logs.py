from uuid import uuid4

import pytest
from httpx import AsyncClient

from account_service.domain.entities import Role
from tests.utils.api_helpers import bearer, login, signup


@pytest.fixture
def admin_headers(app):
    return bearer(app.state.token_service.mint_session(uuid4(), Role.ADMIN))


@pytest.mark.asyncio
async def test_admin_reads_security_logs(client: AsyncClient, admin_headers):
    user = await signup(client)
    await client.post("/api/login", json={"email": user["email"], "password": "wrong-horse-1"})

    response = await client.get("/api/security-logs", headers=admin_headers)

    assert response.status_code == 200
    entries = response.json()["payload"]
    assert [e["event"] for e in entries[:2]] == ["login_failure", "signup_success"]
    entry = entries[0]
    assert entry["level"] == "WARNING"
    assert entry["ipAddress"] == "127.0.0.1"
    assert entry["details"]["reason"] == "invalid_password"
    assert "timestamp" in entry


@pytest.mark.asyncio
async def test_filter_by_level_and_limit(client: AsyncClient, admin_headers):
    user = await signup(client)
    for _ in range(2):
        await client.post("/api/login", json={"email": user["email"], "password": "wrong-horse-1"})

    response = await client.get(
        "/api/security-logs", params={"level": "WARNING", "limit": 1}, headers=admin_headers
    )

    entries = response.json()["payload"]
    assert len(entries) == 1
    assert entries[0]["level"] == "WARNING"


@pytest.mark.asyncio
async def test_non_admin_is_forbidden(client: AsyncClient):
    user = await signup(client)
    token = await login(client, user["email"], user["password"])

    response = await client.get("/api/security-logs", headers=bearer(token))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_requires_session(client: AsyncClient, app):
    response = await client.get("/api/security-logs")

    assert response.status_code == 401
    assert app.state.security_log.query()[0].event == "unauthorized_access"


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, 1001])
async def test_limit_bounds(client: AsyncClient, admin_headers, limit):
    response = await client.get("/api/security-logs", params={"limit": limit}, headers=admin_headers)

    assert response.status_code == 400
    assert "limit" in response.json()["message"]
