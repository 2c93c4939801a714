from typing import List

from account_service.app.services.unit_of_work import UnitOfWork
from account_service.libs.result import Result, Return

from .dtos import SecretQuestionInfo


class ListSecretQuestionsUseCase:
    """Returns the whole secret question catalog ordered by id"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[List[SecretQuestionInfo]]:
        async with self.uow:
            questions = await self.uow.secret_questions.list_all()
            return Return.ok(
                [SecretQuestionInfo(id=q.id, question=q.question) for q in questions]
            )
