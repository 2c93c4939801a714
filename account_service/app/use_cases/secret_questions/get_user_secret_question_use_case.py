"""
Get User Secret Question Use Case

Returns the secret question chosen by the logged-in user.
"""

from uuid import UUID

from account_service.app.services.unit_of_work import UnitOfWork
from account_service.libs.result import Error, Result, Return

from .dtos import SecretQuestionInfo


class GetUserSecretQuestionUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[SecretQuestionInfo]:
        """
        Args:
            user_id: User UUID from the session token

        Returns:
            Result with SecretQuestionInfo, or Error(NOT_FOUND)
        """
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None or not user.secret_question_id:
                return Return.err(Error("NOT_FOUND", "No secret question is set for this account."))

            question = await self.uow.secret_questions.get_by_id(user.secret_question_id)
            if question is None:
                return Return.err(Error("NOT_FOUND", "The secret question could not be found."))

            return Return.ok(SecretQuestionInfo(id=question.id, question=question.question))
