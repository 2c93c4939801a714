"""
Update Secret Question Use Case

Replaces the secret question and answer of the logged-in user.
"""

from datetime import datetime
from uuid import UUID

from account_service.app.services import rate_limiter as limits
from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityEvent, SecurityLog
from account_service.app.services.token_service import SessionClaims
from account_service.app.services.unit_of_work import UnitOfWork
from account_service.domain.entities import SecurityLevel
from account_service.libs.result import Error, Result, Return

from .dtos import ClientInfo, rate_limited_error
from .validation import first_error, validate_question_id, validate_required


class UpdateSecretQuestionUseCase:
    """
    Use case for changing the secret question.

    Business Rules:
    - Requires a session token and the current password, so a stolen
      session alone cannot swap the recovery challenge
    - 3 attempts per user per hour, so the password cannot be guessed
      through this endpoint
    - New question must exist in the catalog
    - Question id and answer hash are written together
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        rate_limiter: RateLimiter,
        security_log: SecurityLog,
    ):
        self.uow = uow
        self.hasher = hasher
        self.rate_limiter = rate_limiter
        self.security_log = security_log

    def _fail(self, session: SessionClaims, client: ClientInfo, reason: str, error: Error) -> Result[None]:
        self.security_log.record(
            SecurityLevel.WARNING,
            SecurityEvent.SECRET_QUESTION_CHANGE_FAILURE,
            ip_address=client.ip_address,
            user_id=session.sub,
            user_agent=client.user_agent,
            details={"reason": reason},
        )
        return Return.err(error)

    async def execute(
        self,
        session: SessionClaims,
        secret_question_id: int,
        secret_answer: str,
        current_password: str,
        client: ClientInfo = ClientInfo(),
    ) -> Result[None]:
        """
        Execute update secret question use case.

        Args:
            session: Verified session token claims
            secret_question_id: New catalog question id
            secret_answer: New plain text answer
            current_password: Current password for re-authentication
            client: Caller IP and user agent

        Returns:
            Result with None, or
            Error(RATE_LIMITED | VALIDATION_ERROR | NOT_FOUND | INVALID_CREDENTIALS)
        """
        limit = self.rate_limiter.check_rule("update_secret_question", session.sub, limits.PASSWORD_RESET)
        if not limit.allowed:
            self.security_log.record(
                SecurityLevel.WARNING,
                SecurityEvent.RATE_LIMIT_EXCEEDED,
                ip_address=client.ip_address,
                user_id=session.sub,
                user_agent=client.user_agent,
                details={"action": "update_secret_question", "retry_after": limit.retry_after},
            )
            return Return.err(rate_limited_error(limit))

        error = first_error(
            validate_question_id(secret_question_id),
            validate_required(secret_answer, "secretAnswer"),
            validate_required(current_password, "currentPassword"),
        )
        if error is not None:
            return Return.err(error)

        async with self.uow:
            user = await self.uow.users.get_by_id(UUID(session.sub))
            if user is None:
                return self._fail(session, client, "user_not_found", Error("NOT_FOUND", "User not found."))

            if not self.hasher.verify(current_password, user.password_hash):
                return self._fail(
                    session,
                    client,
                    "invalid_password",
                    Error("INVALID_CREDENTIALS", "The current password is incorrect."),
                )

            question = await self.uow.secret_questions.get_by_id(secret_question_id)
            if question is None:
                return self._fail(
                    session,
                    client,
                    "secret_question_not_found",
                    Error("NOT_FOUND", "The selected secret question does not exist."),
                )

            user.secret_question_id = question.id
            user.secret_answer_hash = self.hasher.hash(secret_answer)
            user.updated_at = datetime.utcnow()
            await self.uow.users.update(user)

            await self.uow.commit()

        self.security_log.record(
            SecurityLevel.INFO,
            SecurityEvent.SECRET_QUESTION_CHANGE,
            ip_address=client.ip_address,
            user_id=session.sub,
            user_agent=client.user_agent,
            details={"secret_question_id": secret_question_id},
        )
        return Return.ok(None)
