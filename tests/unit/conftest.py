from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityLog
from account_service.app.services.token_service import TokenService
from account_service.app.use_cases.auth import ClientInfo
from account_service.domain.entities import Role, SecretQuestion, User


class FakeClock:
    """Manually advanced clock returning an aware datetime"""

    def __init__(self):
        self.now = datetime.now(UTC)

    def __call__(self) -> datetime:
        return self.now

    def timestamp(self) -> float:
        return self.now.timestamp()

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)

    uow.secret_questions = MagicMock()
    uow.secret_questions.get_by_id = AsyncMock(return_value=None)
    uow.secret_questions.list_all = AsyncMock(return_value=[])
    return uow


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service(clock):
    return TokenService("unit-test-secret", clock=clock)


@pytest.fixture
def rate_limiter(clock):
    return RateLimiter(clock=clock.timestamp)


@pytest.fixture
def security_log():
    return SecurityLog()


@pytest.fixture
def client_info():
    return ClientInfo(ip_address="203.0.113.7", user_agent="pytest-agent")


@pytest.fixture
def question():
    return SecretQuestion(id=1, question="What was the name of your first pet?")


@pytest.fixture
def make_user(hasher):
    def _make_user(
        email: str = "grace@example.com",
        password: str = "correct-horse-1",
        answer: str = "Biscuit",
        role: Role = Role.USER,
        secret_question_id: int = 1,
    ) -> User:
        return User(
            id=uuid4(),
            email=email,
            name="Grace Recovery",
            role=role,
            password_hash=hasher.hash(password),
            secret_question_id=secret_question_id,
            secret_answer_hash=hasher.hash(answer),
        )

    return _make_user
