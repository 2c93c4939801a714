import pytest
from httpx import AsyncClient

from account_service.app.services.security_log import SecurityEvent
from tests.utils.api_helpers import bearer, csrf_headers, login, signup


@pytest.mark.asyncio
async def test_csrf_token_endpoint_sets_cookie(client: AsyncClient, app):
    response = await client.get("/api/csrf-token")

    assert response.status_code == 200
    token = response.json()["payload"]["csrfToken"]
    assert app.state.csrf_guard.verify(token)

    cookie = response.headers["set-cookie"]
    assert cookie.startswith(f"csrfToken={token}")
    assert "samesite=strict" in cookie.lower()
    assert "httponly" not in cookie.lower()
    assert "Max-Age=3600" in cookie


@pytest.mark.asyncio
async def test_update_password_without_csrf_is_forbidden(client: AsyncClient, app, test_data):
    user = await signup(client)
    token = await login(client, user["email"], user["password"])

    response = await client.post(
        "/api/update-password", json={"newPassword": test_data.get("new_password")}, headers=bearer(token)
    )

    assert response.status_code == 403
    assert response.json()["success"] is False
    assert app.state.security_log.query()[0].event == SecurityEvent.CSRF_TOKEN_INVALID

    # password unchanged
    await login(client, user["email"], user["password"])


@pytest.mark.asyncio
async def test_header_must_match_cookie(client: AsyncClient, app, test_data):
    user = await signup(client)
    token = await login(client, user["email"], user["password"])

    headers = await csrf_headers(client, bearer(token))
    headers["X-CSRF-Token"] = app.state.csrf_guard.issue()

    response = await client.post(
        "/api/update-password", json={"newPassword": test_data.get("new_password")}, headers=headers
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_forged_token_is_rejected(client: AsyncClient):
    forged = "1700000000000:deadbeefdeadbeefdeadbeefdeadbeef:" + "0" * 64
    client.cookies.set("csrfToken", forged)

    response = await client.put(
        "/api/update-secret-question",
        json={"secretQuestionId": 2, "secretAnswer": "x", "currentPassword": "whatever-123"},
        headers={"X-CSRF-Token": forged},
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_non_ascii_digit_timestamp_is_rejected(client: AsyncClient, app):
    token = "²:nonce:sig".encode("latin-1")

    response = await client.post(
        "/api/update-password",
        json={"newPassword": "brand-new-pass-3"},
        headers={"X-CSRF-Token": token, "Cookie": b"csrfToken=" + token},
    )

    assert response.status_code == 403
    assert app.state.security_log.query()[0].event == SecurityEvent.CSRF_TOKEN_INVALID
