"""
Update Password Use Case

Sets a new password for a user authorized either by a password-reset token
or by a session token.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.security_log import SecurityEvent, SecurityLog
from account_service.app.services.token_service import TokenService
from account_service.app.services.unit_of_work import UnitOfWork
from account_service.domain.entities import SecurityLevel, TokenPurpose
from account_service.libs.result import Error, Result, Return

from .dtos import ClientInfo
from .validation import validate_password

INVALID_RESET_TOKEN_MESSAGE = (
    "The password reset token is invalid or has expired. Please verify your identity again."
)
UNAUTHORIZED_MESSAGE = "Authentication is invalid. Please log in or reset your password."


class UpdatePasswordUseCase:
    """
    Use case for updating a password.

    Business Rules:
    - A reset token, when supplied, is the only credential considered; an
      invalid reset token fails even if a valid session token is also sent
    - Without a reset token a valid session token is required
    - New password follows the signup policy (ASCII only, min 8 chars)
    - Password is hashed with bcrypt
    - Other session tokens are not revoked; they expire on their own
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: TokenService,
        hasher: PasswordHasher,
        security_log: SecurityLog,
    ):
        self.uow = uow
        self.token_service = token_service
        self.hasher = hasher
        self.security_log = security_log

    def _authorize(self, reset_token: Optional[str], session_token: Optional[str]) -> Result:
        """Resolve the acting user id and the capability that authorized it"""
        if reset_token:
            verified = self.token_service.verify(reset_token, TokenPurpose.password_reset)
            if verified.is_err():
                return Return.err(Error("INVALID_TOKEN", INVALID_RESET_TOKEN_MESSAGE))
            return Return.ok((verified.value.sub, TokenPurpose.password_reset))

        if not session_token:
            return Return.err(Error("UNAUTHORIZED", UNAUTHORIZED_MESSAGE))

        verified = self.token_service.verify(session_token, TokenPurpose.session)
        if verified.is_err():
            return Return.err(Error("UNAUTHORIZED", UNAUTHORIZED_MESSAGE))
        return Return.ok((verified.value.sub, TokenPurpose.session))

    async def execute(
        self,
        new_password: str,
        client: ClientInfo = ClientInfo(),
        reset_token: Optional[str] = None,
        session_token: Optional[str] = None,
    ) -> Result[None]:
        """
        Execute update password use case.

        Args:
            new_password: New plain text password
            client: Caller IP and user agent
            reset_token: Password-reset token (takes priority when present)
            session_token: Session token

        Returns:
            Result with None, or
            Error(INVALID_TOKEN | UNAUTHORIZED | VALIDATION_ERROR | NOT_FOUND)
        """
        authorization = self._authorize(reset_token, session_token)
        if authorization.is_err():
            self.security_log.record(
                SecurityLevel.WARNING,
                SecurityEvent.JWT_TOKEN_INVALID,
                ip_address=client.ip_address,
                user_agent=client.user_agent,
                details={
                    "action": "update_password",
                    "credential": "reset_token" if reset_token else "session_token",
                },
            )
            return Return.err(authorization.error)

        user_id, purpose = authorization.value

        validation = validate_password(new_password, "newPassword")
        if validation.is_err():
            return Return.err(validation.error)

        async with self.uow:
            user = await self.uow.users.get_by_id(UUID(user_id))
            if user is None:
                self.security_log.record(
                    SecurityLevel.WARNING,
                    SecurityEvent.PASSWORD_CHANGE_FAILURE,
                    ip_address=client.ip_address,
                    user_id=user_id,
                    user_agent=client.user_agent,
                    details={"reason": "user_not_found"},
                )
                return Return.err(Error("NOT_FOUND", "User not found."))

            user.password_hash = self.hasher.hash(new_password)
            user.updated_at = datetime.utcnow()
            await self.uow.users.update(user)

            await self.uow.commit()

        self.security_log.record(
            SecurityLevel.INFO,
            SecurityEvent.PASSWORD_CHANGE,
            ip_address=client.ip_address,
            user_id=user_id,
            user_agent=client.user_agent,
            details={"authorized_by": purpose.value},
        )
        return Return.ok(None)
