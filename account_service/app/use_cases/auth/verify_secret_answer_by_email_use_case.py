"""
Verify Secret Answer By Email Use Case (anonymous recovery path)

Lets a user who cannot log in prove who they are with email + secret answer
and receive a password-reset token.
"""

from datetime import timedelta

from account_service.app.services import rate_limiter as limits
from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityEvent, SecurityLog
from account_service.app.services.token_service import EMAIL_RESET_TOKEN_TTL, TokenService
from account_service.app.services.unit_of_work import UnitOfWork
from account_service.domain.entities import SecurityLevel
from account_service.libs.result import Error, Result, Return

from .dtos import ClientInfo, ResetTokenResponse, rate_limited_error
from .validation import first_error, validate_required
from .verify_secret_answer_use_case import INVALID_ANSWER_MESSAGE


class VerifySecretAnswerByEmailUseCase:
    """
    Use case for anonymous secret answer verification.

    Business Rules:
    - 3 attempts per client IP per hour
    - Unknown email and wrong answer are indistinguishable: same error,
      same message, and a bcrypt check is run either way
    - The reset token carries user id and email and lives 10 minutes
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: TokenService,
        hasher: PasswordHasher,
        rate_limiter: RateLimiter,
        security_log: SecurityLog,
        reset_token_ttl: timedelta = EMAIL_RESET_TOKEN_TTL,
    ):
        self.uow = uow
        self.token_service = token_service
        self.hasher = hasher
        self.rate_limiter = rate_limiter
        self.security_log = security_log
        self.reset_token_ttl = reset_token_ttl

    async def execute(
        self, email: str, secret_answer: str, client: ClientInfo = ClientInfo()
    ) -> Result[ResetTokenResponse]:
        """
        Execute anonymous verify secret answer use case.

        Args:
            email: Account email (exact match)
            secret_answer: Plain text secret answer
            client: Caller IP and user agent

        Returns:
            Result with ResetTokenResponse, or
            Error(RATE_LIMITED | VALIDATION_ERROR | INVALID_ANSWER)
        """
        limit = self.rate_limiter.check_rule("password_reset", client.ip_address, limits.PASSWORD_RESET)
        if not limit.allowed:
            self.security_log.record(
                SecurityLevel.WARNING,
                SecurityEvent.RATE_LIMIT_EXCEEDED,
                ip_address=client.ip_address,
                user_agent=client.user_agent,
                details={"action": "password_reset", "retry_after": limit.retry_after},
            )
            return Return.err(rate_limited_error(limit))

        error = first_error(
            validate_required(email, "email"),
            validate_required(secret_answer, "secretAnswer"),
        )
        if error is not None:
            return Return.err(error)

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                valid = self.hasher.dummy_verify(secret_answer)
            else:
                valid = self.hasher.verify(secret_answer, user.secret_answer_hash)

            if not valid:
                self.security_log.record(
                    SecurityLevel.WARNING,
                    SecurityEvent.SECRET_ANSWER_FAILURE,
                    ip_address=client.ip_address,
                    user_id=user.id if user else None,
                    user_agent=client.user_agent,
                    details={
                        "path": "email",
                        "reason": "user_not_found" if user is None else "invalid_answer",
                        "email": email,
                    },
                )
                return Return.err(Error("INVALID_ANSWER", INVALID_ANSWER_MESSAGE))

            reset_token = self.token_service.mint_reset(user.id, user.email, self.reset_token_ttl)

            self.security_log.record(
                SecurityLevel.INFO,
                SecurityEvent.PASSWORD_RESET_REQUEST,
                ip_address=client.ip_address,
                user_id=user.id,
                user_agent=client.user_agent,
                details={"path": "email", "email": user.email},
            )
            return Return.ok(ResetTokenResponse(reset_token=reset_token))
