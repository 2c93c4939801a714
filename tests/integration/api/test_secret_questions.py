import pytest
from httpx import AsyncClient

from tests.utils.api_helpers import bearer, login, signup


@pytest.mark.asyncio
async def test_list_secret_questions(client: AsyncClient, test_data):
    response = await client.get("/api/secret-questions")

    assert response.status_code == 200
    payload = response.json()["payload"]
    assert [q["id"] for q in payload] == [1, 2, 3, 4]
    assert [q["question"] for q in payload] == test_data.get("secret_questions")


@pytest.mark.asyncio
async def test_user_secret_question_requires_session(client: AsyncClient):
    response = await client.get("/api/user-secret-question")

    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_user_secret_question(client: AsyncClient):
    user = await signup(client, "second_signup")
    token = await login(client, user["email"], user["password"])

    response = await client.get("/api/user-secret-question", headers=bearer(token))

    assert response.status_code == 200
    assert response.json()["payload"]["id"] == user["secretQuestionId"]


@pytest.mark.asyncio
async def test_reset_token_is_not_a_session(client: AsyncClient, app):
    reset_token = app.state.token_service.mint_reset(
        "8f14e45f-ceea-467f-a8f5-7c5b9c1d2e3f", "grace@example.com"
    )

    response = await client.get("/api/user-secret-question", headers=bearer(reset_token))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_question_by_email(client: AsyncClient):
    user = await signup(client, "second_signup")

    response = await client.get(
        "/api/user-secret-question-by-email", params={"email": user["email"]}
    )

    assert response.status_code == 200
    assert response.json()["payload"]["id"] == user["secretQuestionId"]


@pytest.mark.asyncio
async def test_question_by_unknown_email_looks_real(client: AsyncClient, test_data):
    """Unknown emails get a stable catalog question instead of a 404"""
    email = test_data.get("unknown_email")

    first = await client.get("/api/user-secret-question-by-email", params={"email": email})
    second = await client.get("/api/user-secret-question-by-email", params={"email": email})

    assert first.status_code == 200
    assert first.content == second.content
    assert first.json()["payload"]["question"] in test_data.get("secret_questions")
