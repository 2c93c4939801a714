import pytest
from httpx import AsyncClient

from tests.utils.api_helpers import bearer, csrf_headers, login, signup


@pytest.fixture
def new_question():
    return {"secretQuestionId": 4, "secretAnswer": "Teal"}


@pytest.mark.asyncio
async def test_update_secret_question(client: AsyncClient, new_question):
    user = await signup(client)
    token = await login(client, user["email"], user["password"])

    headers = await csrf_headers(client, bearer(token))
    response = await client.put(
        "/api/update-secret-question",
        json={**new_question, "currentPassword": user["password"]},
        headers=headers,
    )
    assert response.status_code == 200

    current = await client.get("/api/user-secret-question", headers=bearer(token))
    assert current.json()["payload"]["id"] == 4

    old_answer = await client.post(
        "/api/verify-secret-answer-by-email",
        json={"email": user["email"], "secretAnswer": user["secretAnswer"]},
    )
    assert old_answer.status_code == 401

    new_answer = await client.post(
        "/api/verify-secret-answer-by-email",
        json={"email": user["email"], "secretAnswer": "Teal"},
    )
    assert new_answer.status_code == 200


@pytest.mark.asyncio
async def test_update_secret_question_wrong_password(client: AsyncClient, new_question):
    user = await signup(client)
    token = await login(client, user["email"], user["password"])

    headers = await csrf_headers(client, bearer(token))
    response = await client.put(
        "/api/update-secret-question",
        json={**new_question, "currentPassword": "wrong-horse-1"},
        headers=headers,
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_secret_question_unknown_question(client: AsyncClient):
    user = await signup(client)
    token = await login(client, user["email"], user["password"])

    headers = await csrf_headers(client, bearer(token))
    response = await client.put(
        "/api/update-secret-question",
        json={"secretQuestionId": 999, "secretAnswer": "Teal", "currentPassword": user["password"]},
        headers=headers,
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_secret_question_requires_session(client: AsyncClient, new_question):
    headers = await csrf_headers(client)

    response = await client.put(
        "/api/update-secret-question",
        json={**new_question, "currentPassword": "whatever-123"},
        headers=headers,
    )

    assert response.status_code == 401
