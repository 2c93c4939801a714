"""
Login Use Case

Handles password authentication and returns a session token.
"""

from account_service.app.services import rate_limiter as limits
from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityEvent, SecurityLog
from account_service.app.services.token_service import TokenService
from account_service.app.services.unit_of_work import UnitOfWork
from account_service.domain.entities import SecurityLevel
from account_service.libs.result import Error, Result, Return

from .dtos import ClientInfo, rate_limited_error
from .validation import first_error, validate_required

INVALID_CREDENTIALS_MESSAGE = "The email address and password combination is incorrect."


class LoginUseCase:
    """
    Use case for user login and session token issuance.

    Business Rules:
    - At most 5 attempts per client IP per 15 minutes; a blocked attempt
      never reaches the store
    - Unknown email and wrong password produce the same error, and an
      unknown email still pays for a bcrypt check
    - The failure reason is only written to the security log
    - Session token lives 3 hours
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: TokenService,
        hasher: PasswordHasher,
        rate_limiter: RateLimiter,
        security_log: SecurityLog,
    ):
        self.uow = uow
        self.token_service = token_service
        self.hasher = hasher
        self.rate_limiter = rate_limiter
        self.security_log = security_log

    def _invalid_credentials(self, client: ClientInfo, reason: str, email: str, user_id=None) -> Result[str]:
        self.security_log.record(
            SecurityLevel.WARNING,
            SecurityEvent.LOGIN_FAILURE,
            ip_address=client.ip_address,
            user_id=user_id,
            user_agent=client.user_agent,
            details={"reason": reason, "email": email},
        )
        return Return.err(Error("INVALID_CREDENTIALS", INVALID_CREDENTIALS_MESSAGE))

    async def execute(self, email: str, password: str, client: ClientInfo = ClientInfo()) -> Result[str]:
        """
        Execute login use case.

        Args:
            email: User email (exact match)
            password: Plain text password
            client: Caller IP and user agent

        Returns:
            Result with the session token string, or
            Error(RATE_LIMITED | VALIDATION_ERROR | INVALID_CREDENTIALS)
        """
        limit = self.rate_limiter.check_rule("login", client.ip_address, limits.LOGIN)
        if not limit.allowed:
            self.security_log.record(
                SecurityLevel.WARNING,
                SecurityEvent.LOGIN_RATE_LIMIT,
                ip_address=client.ip_address,
                user_agent=client.user_agent,
                details={"retry_after": limit.retry_after, "reset_time": limit.reset_time},
            )
            return Return.err(rate_limited_error(limit))

        error = first_error(validate_required(email, "email"), validate_required(password, "password"))
        if error is not None:
            return Return.err(error)

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                self.hasher.dummy_verify(password)
                return self._invalid_credentials(client, "user_not_found", email)

            if not self.hasher.verify(password, user.password_hash):
                return self._invalid_credentials(client, "invalid_password", email, user.id)

            token = self.token_service.mint_session(user.id, user.role)

            self.security_log.record(
                SecurityLevel.INFO,
                SecurityEvent.LOGIN_SUCCESS,
                ip_address=client.ip_address,
                user_id=user.id,
                user_agent=client.user_agent,
                details={"email": user.email},
            )
            return Return.ok(token)
