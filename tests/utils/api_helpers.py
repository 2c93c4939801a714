from typing import Dict, Optional

from httpx import AsyncClient

from tests.fixtures.json_loader import FixtureData


async def signup(client: AsyncClient, key: str = "signup", **overrides) -> dict:
    payload = FixtureData.signup_payload(key, **overrides)
    response = await client.post("/api/signup", json=payload)
    assert response.status_code == 201, response.text
    return payload


async def login(client: AsyncClient, email: str, password: str) -> str:
    response = await client.post("/api/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["payload"]


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def csrf_headers(client: AsyncClient, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Fetch a CSRF token, keep it as the cookie and echo it in the header"""
    response = await client.get("/api/csrf-token")
    assert response.status_code == 200, response.text
    token = response.json()["payload"]["csrfToken"]
    client.cookies.set("csrfToken", token)
    headers = {"X-CSRF-Token": token}
    headers.update(extra or {})
    return headers
