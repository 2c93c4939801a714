import pytest

from account_service.app.services.security_log import SecurityEvent
from account_service.app.use_cases.auth import UpdateSecretQuestionUseCase
from account_service.domain.entities import Role, SecretQuestion


@pytest.fixture
def use_case(mock_uow, hasher, rate_limiter, security_log):
    return UpdateSecretQuestionUseCase(mock_uow, hasher, rate_limiter, security_log)


@pytest.fixture
def user(mock_uow, make_user):
    user = make_user()
    mock_uow.users.get_by_id.return_value = user
    return user


@pytest.fixture
def session(token_service, user):
    return token_service.verify_session(token_service.mint_session(user.id, Role.USER)).value


@pytest.mark.asyncio
async def test_update_secret_question(use_case, mock_uow, hasher, security_log, user, session):
    mock_uow.secret_questions.get_by_id.return_value = SecretQuestion(id=4, question="Favorite color?")

    result = await use_case.execute(session, 4, "Teal", "correct-horse-1")

    assert result.is_ok()
    assert user.secret_question_id == 4
    assert hasher.verify("Teal", user.secret_answer_hash)
    assert not hasher.verify("Biscuit", user.secret_answer_hash)
    mock_uow.commit.assert_called_once()
    assert security_log.query()[0].event == SecurityEvent.SECRET_QUESTION_CHANGE


@pytest.mark.asyncio
async def test_wrong_current_password(use_case, mock_uow, user, session):
    mock_uow.secret_questions.get_by_id.return_value = SecretQuestion(id=4, question="Favorite color?")

    result = await use_case.execute(session, 4, "Teal", "wrong-horse-1")

    assert result.error.code == "INVALID_CREDENTIALS"
    assert user.secret_question_id == 1
    mock_uow.users.update.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_question(use_case, mock_uow, security_log, user, session):
    result = await use_case.execute(session, 42, "Teal", "correct-horse-1")

    assert result.error.code == "NOT_FOUND"
    mock_uow.commit.assert_not_called()
    assert security_log.query()[0].details == {"reason": "secret_question_not_found"}


@pytest.mark.asyncio
async def test_invalid_input(use_case, mock_uow, session):
    result = await use_case.execute(session, 0, "Teal", "correct-horse-1")
    assert result.error.code == "VALIDATION_ERROR"

    result = await use_case.execute(session, 2, "", "correct-horse-1")
    assert result.error.message.startswith("secretAnswer:")

    mock_uow.users.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_current_password_guesses_are_rate_limited(use_case, mock_uow, security_log, user, session):
    mock_uow.secret_questions.get_by_id.return_value = SecretQuestion(id=4, question="Favorite color?")
    for guess in ("guess-one-1", "guess-two-2", "guess-three-3"):
        result = await use_case.execute(session, 4, "Teal", guess)
        assert result.error.code == "INVALID_CREDENTIALS"

    result = await use_case.execute(session, 4, "Teal", "correct-horse-1")

    assert result.error.code == "RATE_LIMITED"
    assert result.error.details["retry_after"] == 60 * 60
    assert user.secret_question_id == 1
    assert security_log.query()[0].event == SecurityEvent.RATE_LIMIT_EXCEEDED
    assert mock_uow.users.get_by_id.call_count == 3
