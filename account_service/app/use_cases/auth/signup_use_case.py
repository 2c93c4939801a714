"""
Signup Use Case

Creates a user account with a password and a secret question.
"""

import asyncio
from datetime import datetime
from typing import Optional

from account_service.app.repositories.user_repository import EmailAlreadyRegistered
from account_service.app.services import rate_limiter as limits
from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityEvent, SecurityLog
from account_service.app.services.unit_of_work import UnitOfWork
from account_service.domain.entities import Role, SecurityLevel, User
from account_service.libs.result import Error, Result, Return

from .dtos import ClientInfo, UserProfile, rate_limited_error
from .signup_dto import SignupCommand
from .validation import (
    first_error,
    validate_email,
    validate_password,
    validate_question_id,
    validate_required,
    validation_error,
)

SIGNUP_FAILED_MESSAGE = "Signup could not be completed. Please check your details and try again."


def to_profile(user: User) -> UserProfile:
    return UserProfile(
        id=str(user.id),
        name=user.name,
        email=user.email,
        role=Role(user.role).value,
        about_slug=user.about_slug,
        about_content=user.about_content or "",
    )


class SignupUseCase:
    """
    Signup Use Case

    Business Logic:
    1. Rate limit per client IP (HTTP callers; in-process calls carry no IP)
    2. Validate name, email, password policy, password confirmation, answer
    3. Wait a fixed delay to slow down scripted registrations
    4. Check the secret question exists
    5. Reject a registered email with a generic message (no enumeration)
    6. Hash password and secret answer independently
    7. Create User with role=USER
    8. Record one security log entry for the outcome
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        rate_limiter: RateLimiter,
        security_log: SecurityLog,
        delay_seconds: float = 1.0,
    ):
        self.uow = uow
        self.hasher = hasher
        self.rate_limiter = rate_limiter
        self.security_log = security_log
        self.delay_seconds = delay_seconds

    def _validate(self, command: SignupCommand) -> Result[None]:
        error = first_error(
            validate_required(command.name, "name"),
            validate_email(command.email),
            validate_password(command.password),
        )
        if error is None and command.password != command.confirm_password:
            error = validation_error("confirmPassword", "passwords do not match")
        if error is None:
            error = first_error(
                validate_question_id(command.secret_question_id),
                validate_required(command.secret_answer, "secretAnswer"),
            )
        if error is not None:
            return Return.err(error)
        return Return.ok(None)

    def _fail(self, client: ClientInfo, reason: str, error: Error, email: str) -> Result[UserProfile]:
        self.security_log.record(
            SecurityLevel.WARNING,
            SecurityEvent.SIGNUP_FAILURE,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
            details={"reason": reason, "email": email},
        )
        return Return.err(error)

    async def execute(self, command: SignupCommand, client: Optional[ClientInfo] = None) -> Result[UserProfile]:
        """
        Execute signup use case

        Args:
            command: SignupCommand with raw user input
            client: Caller IP and user agent; None skips the per-IP limit

        Returns:
            Result[UserProfile] without any credential fields, or
            Error(RATE_LIMITED | VALIDATION_ERROR | CONFLICT)
        """
        if client is not None:
            limit = self.rate_limiter.check_rule("signup", client.ip_address, limits.SIGNUP)
            if not limit.allowed:
                self.security_log.record(
                    SecurityLevel.WARNING,
                    SecurityEvent.RATE_LIMIT_EXCEEDED,
                    ip_address=client.ip_address,
                    user_agent=client.user_agent,
                    details={"action": "signup", "retry_after": limit.retry_after},
                )
                return Return.err(rate_limited_error(limit))
        else:
            client = ClientInfo()

        validation = self._validate(command)
        if validation.is_err():
            return self._fail(client, "validation_failed", validation.error, command.email)

        # Spam registration countermeasure
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        async with self.uow:
            question = await self.uow.secret_questions.get_by_id(command.secret_question_id)
            if question is None:
                return self._fail(
                    client,
                    "secret_question_not_found",
                    validation_error("secretQuestionId", "selected secret question does not exist"),
                    command.email,
                )

            existing_user = await self.uow.users.get_by_email(command.email)
            if existing_user:
                return self._fail(
                    client,
                    "email_already_registered",
                    Error("CONFLICT", SIGNUP_FAILED_MESSAGE),
                    command.email,
                )

            now = datetime.utcnow()
            user = User(
                email=command.email,
                password_hash=self.hasher.hash(command.password),
                name=command.name,
                role=Role.USER,
                secret_question_id=question.id,
                secret_answer_hash=self.hasher.hash(command.secret_answer),
                created_at=now,
                updated_at=now,
            )
            try:
                user = await self.uow.users.create(user)
            except EmailAlreadyRegistered:
                # Lost a race against a concurrent signup for the same email
                return self._fail(
                    client,
                    "email_already_registered",
                    Error("CONFLICT", SIGNUP_FAILED_MESSAGE),
                    command.email,
                )

            await self.uow.commit()

            self.security_log.record(
                SecurityLevel.INFO,
                SecurityEvent.SIGNUP_SUCCESS,
                ip_address=client.ip_address,
                user_id=user.id,
                user_agent=client.user_agent,
                details={"email": user.email},
            )
            return Return.ok(to_profile(user))
