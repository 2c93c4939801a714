from typing import List, Optional

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from account_service.app.repositories.secret_question_repository import (
    ISecretQuestionRepository,
)
from account_service.domain.entities import SecretQuestion


class SecretQuestionRepository(ISecretQuestionRepository):
    """SecretQuestion repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> List[SecretQuestion]:
        stmt = select(SecretQuestion).order_by(SecretQuestion.id.asc())
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_id(self, question_id: int) -> Optional[SecretQuestion]:
        stmt = select(SecretQuestion).where(SecretQuestion.id == question_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, question: SecretQuestion) -> SecretQuestion:
        self.session.add(question)
        await self.session.flush()
        await self.session.refresh(question)
        return question

    async def delete_all(self) -> int:
        result = await self.session.execute(delete(SecretQuestion))
        return result.rowcount
