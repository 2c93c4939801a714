from sqlmodel.ext.asyncio.session import AsyncSession

from account_service.adapter.repositories.secret_question_repository import (
    SecretQuestionRepository,
)
from account_service.adapter.repositories.user_repository import UserRepository
from account_service.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.secret_questions = SecretQuestionRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
