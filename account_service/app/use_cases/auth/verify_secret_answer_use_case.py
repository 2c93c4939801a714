"""
Verify Secret Answer Use Case (logged-in path)

Turns a session token plus the correct secret answer into a short-lived
password-reset token for the same user.
"""

from datetime import timedelta
from uuid import UUID

from account_service.app.services import rate_limiter as limits
from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityEvent, SecurityLog
from account_service.app.services.token_service import RESET_TOKEN_TTL, SessionClaims, TokenService
from account_service.app.services.unit_of_work import UnitOfWork
from account_service.domain.entities import SecurityLevel
from account_service.libs.result import Error, Result, Return

from .dtos import ClientInfo, ResetTokenResponse, rate_limited_error
from .validation import validate_required

INVALID_ANSWER_MESSAGE = "Identity could not be verified with the given answer."


class VerifySecretAnswerUseCase:
    """
    Use case for verifying the caller's own secret answer.

    Business Rules:
    - Caller already holds a valid session token (checked by the API layer)
    - 3 attempts per user per hour
    - A wrong answer gives a generic error with no detail
    - The reset token is scoped to the session's user and lives 15 minutes;
      it authorizes a password update and nothing else
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: TokenService,
        hasher: PasswordHasher,
        rate_limiter: RateLimiter,
        security_log: SecurityLog,
        reset_token_ttl: timedelta = RESET_TOKEN_TTL,
    ):
        self.uow = uow
        self.token_service = token_service
        self.hasher = hasher
        self.rate_limiter = rate_limiter
        self.security_log = security_log
        self.reset_token_ttl = reset_token_ttl

    async def execute(
        self, session: SessionClaims, answer: str, client: ClientInfo = ClientInfo()
    ) -> Result[ResetTokenResponse]:
        """
        Execute verify secret answer use case.

        Args:
            session: Verified session token claims
            answer: Plain text secret answer
            client: Caller IP and user agent

        Returns:
            Result with ResetTokenResponse, or
            Error(RATE_LIMITED | VALIDATION_ERROR | INVALID_ANSWER)
        """
        limit = self.rate_limiter.check_rule("verify_answer", session.sub, limits.PASSWORD_RESET)
        if not limit.allowed:
            self.security_log.record(
                SecurityLevel.WARNING,
                SecurityEvent.RATE_LIMIT_EXCEEDED,
                ip_address=client.ip_address,
                user_id=session.sub,
                user_agent=client.user_agent,
                details={"action": "verify_answer", "retry_after": limit.retry_after},
            )
            return Return.err(rate_limited_error(limit))

        validation = validate_required(answer, "answer")
        if validation.is_err():
            return Return.err(validation.error)

        async with self.uow:
            user = await self.uow.users.get_by_id(UUID(session.sub))

            if user is None:
                valid = self.hasher.dummy_verify(answer)
            else:
                valid = self.hasher.verify(answer, user.secret_answer_hash)

            if not valid:
                self.security_log.record(
                    SecurityLevel.WARNING,
                    SecurityEvent.SECRET_ANSWER_FAILURE,
                    ip_address=client.ip_address,
                    user_id=session.sub,
                    user_agent=client.user_agent,
                    details={"path": "session", "reason": "user_not_found" if user is None else "invalid_answer"},
                )
                return Return.err(Error("INVALID_ANSWER", INVALID_ANSWER_MESSAGE))

            reset_token = self.token_service.mint_reset(user.id, user.email, self.reset_token_ttl)

            self.security_log.record(
                SecurityLevel.INFO,
                SecurityEvent.SECRET_ANSWER_VERIFIED,
                ip_address=client.ip_address,
                user_id=user.id,
                user_agent=client.user_agent,
                details={"path": "session"},
            )
            return Return.ok(ResetTokenResponse(reset_token=reset_token))
