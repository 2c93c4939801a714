import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from account_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from account_service.api.app import create_app
from account_service.depends import get_unit_of_work
from account_service.domain.entities import SecretQuestion
from tests.fixtures.json_loader import FixtureData


class IntegrationConfig(ApplicationConfig):
    SIGNUP_DELAY_SECONDS = 0
    BCRYPT_ROUNDS = 4
    JWT_SECRET = "integration-jwt-secret"
    CSRF_SECRET = "integration-csrf-secret"
    CSRF_PROTECTION_ENABLED = True
    ENABLE_SECURITY_HEADERS = True
    HSTS_ENABLED = False


@pytest.fixture
def test_data():
    return FixtureData


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        for question_id, text in enumerate(FixtureData.get("secret_questions"), start=1):
            session.add(SecretQuestion(id=question_id, question=text))
        await session.commit()

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def app(db_session):
    app = create_app(IntegrationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
