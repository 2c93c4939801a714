"""
Get Secret Question By Email Use Case

First step of anonymous password recovery: show the question for an email.
"""

import hashlib
import hmac

from account_service.app.services import rate_limiter as limits
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityEvent, SecurityLog
from account_service.app.services.unit_of_work import UnitOfWork
from account_service.app.use_cases.auth.dtos import ClientInfo, rate_limited_error
from account_service.app.use_cases.auth.validation import validate_required
from account_service.domain.entities import SecurityLevel
from account_service.libs.result import Error, Result, Return

from .dtos import SecretQuestionInfo


class GetSecretQuestionByEmailUseCase:
    """
    Use case for looking up a secret question by email.

    Business Rules:
    - 60 lookups per client IP per minute
    - No account enumeration: an unknown email gets a decoy question picked
      deterministically from the catalog (keyed HMAC of the email), so the
      same email always shows the same question and the response looks like
      a real one
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: RateLimiter,
        security_log: SecurityLog,
        decoy_secret: str,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.security_log = security_log
        self.decoy_secret = decoy_secret.encode("utf-8")

    def _decoy_index(self, email: str, catalog_size: int) -> int:
        digest = hmac.new(self.decoy_secret, email.encode("utf-8"), hashlib.sha256).digest()
        return int.from_bytes(digest[:8], "big") % catalog_size

    async def execute(self, email: str, client: ClientInfo = ClientInfo()) -> Result[SecretQuestionInfo]:
        """
        Args:
            email: Account email (exact match)
            client: Caller IP and user agent

        Returns:
            Result with SecretQuestionInfo, or Error(RATE_LIMITED | VALIDATION_ERROR | NOT_FOUND)
        """
        limit = self.rate_limiter.check_rule("secret_question_lookup", client.ip_address, limits.GENERAL)
        if not limit.allowed:
            self.security_log.record(
                SecurityLevel.WARNING,
                SecurityEvent.RATE_LIMIT_EXCEEDED,
                ip_address=client.ip_address,
                user_agent=client.user_agent,
                details={"action": "secret_question_lookup", "retry_after": limit.retry_after},
            )
            return Return.err(rate_limited_error(limit))

        validation = validate_required(email, "email")
        if validation.is_err():
            return Return.err(validation.error)

        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            question = None
            if user is not None and user.secret_question_id:
                question = await self.uow.secret_questions.get_by_id(user.secret_question_id)

            if question is None:
                catalog = await self.uow.secret_questions.list_all()
                if not catalog:
                    return Return.err(Error("NOT_FOUND", "No secret questions are available."))
                question = catalog[self._decoy_index(email, len(catalog))]

            return Return.ok(SecretQuestionInfo(id=question.id, question=question.question))
