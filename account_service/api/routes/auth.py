from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Header, status
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from account_service.api.envelope import ApiResponse
from account_service.api.error import raise_for_error
from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityLog
from account_service.app.services.token_service import SessionClaims, TokenService
from account_service.app.services.unit_of_work import UnitOfWork
from account_service.app.use_cases.auth import (
    ClientInfo,
    LoginUseCase,
    ResetTokenResponse,
    SignupCommand,
    SignupUseCase,
    UpdatePasswordUseCase,
    UpdateSecretQuestionUseCase,
    UserProfile,
    VerifySecretAnswerByEmailUseCase,
    VerifySecretAnswerUseCase,
)
from account_service.depends import (
    get_bearer_token,
    get_client,
    get_config,
    get_current_user,
    get_password_hasher,
    get_rate_limiter,
    get_security_log,
    get_token_service,
    get_unit_of_work,
    require_csrf,
)

router = APIRouter(tags=["Authentication"])


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignupRequest(CamelModel):
    """
    Signup HTTP request payload

    Only shape is checked here; the use case applies the signup rules so the
    in-process and HTTP entry points behave the same.
    """

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="User email address")
    password: str = Field(..., description="Password (ASCII, min 8 chars)")
    confirm_password: str = Field(..., description="Password confirmation")
    secret_question_id: int = Field(..., description="Chosen secret question id")
    secret_answer: str = Field(..., description="Answer to the secret question")


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[UserProfile])
async def signup(
    request: SignupRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    security_log: SecurityLog = Depends(get_security_log),
    client: ClientInfo = Depends(get_client),
    config=Depends(get_config),
):
    """
    User Signup

    Creates a user with a password and a secret question. Responds after a
    fixed delay. Returns the sanitized profile.

    Raises:
        - 400 Bad Request: Invalid input, or signup refused (generic message)
        - 429 Too Many Requests: Signup rate limit exceeded
    """
    command = SignupCommand(
        name=request.name,
        email=request.email,
        password=request.password,
        confirm_password=request.confirm_password,
        secret_question_id=request.secret_question_id,
        secret_answer=request.secret_answer,
    )

    use_case = SignupUseCase(
        uow, hasher, rate_limiter, security_log, delay_seconds=config.SIGNUP_DELAY_SECONDS
    )
    result = await use_case.execute(command, client)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse[UserProfile](success=True, payload=result.value, message="")


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Fields are optional at the HTTP layer so that the rate limit is counted
    before the body is judged.
    """

    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=ApiResponse[str])
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    security_log: SecurityLog = Depends(get_security_log),
    client: ClientInfo = Depends(get_client),
):
    """
    User Login

    Authenticates with email and password; the payload is a 3 hour session
    token.

    Raises:
        - 400 Bad Request: Missing email or password
        - 401 Unauthorized: Invalid credentials (same body for unknown email
          and wrong password)
        - 429 Too Many Requests: 5 attempts per IP per 15 minutes
    """
    use_case = LoginUseCase(uow, token_service, hasher, rate_limiter, security_log)
    result = await use_case.execute(request.email, request.password, client)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse[str](success=True, payload=result.value, message="")


class VerifySecretAnswerRequest(BaseModel):
    answer: str = Field(..., description="Answer to the caller's secret question")


@router.post(
    "/verify-secret-answer",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[ResetTokenResponse],
)
async def verify_secret_answer(
    request: VerifySecretAnswerRequest,
    current_user: SessionClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    security_log: SecurityLog = Depends(get_security_log),
    client: ClientInfo = Depends(get_client),
    config=Depends(get_config),
):
    """
    Verify Secret Answer (logged in)

    Exchanges the correct secret answer for a 15 minute password-reset token.

    Raises:
        - 401 Unauthorized: Missing/invalid session, or wrong answer
        - 429 Too Many Requests: 3 attempts per user per hour
    """
    use_case = VerifySecretAnswerUseCase(
        uow,
        token_service,
        hasher,
        rate_limiter,
        security_log,
        reset_token_ttl=timedelta(seconds=config.RESET_TOKEN_TTL_SECONDS),
    )
    result = await use_case.execute(current_user, request.answer, client)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse[ResetTokenResponse](
        success=True, payload=result.value, message="Identity verified."
    )


class VerifySecretAnswerByEmailRequest(CamelModel):
    email: str = Field(..., description="Account email address")
    secret_answer: str = Field(..., description="Answer to the account's secret question")


@router.post(
    "/verify-secret-answer-by-email",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[ResetTokenResponse],
)
async def verify_secret_answer_by_email(
    request: VerifySecretAnswerByEmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    security_log: SecurityLog = Depends(get_security_log),
    client: ClientInfo = Depends(get_client),
    config=Depends(get_config),
):
    """
    Verify Secret Answer By Email (anonymous recovery)

    Exchanges email + correct secret answer for a 10 minute password-reset
    token.

    Raises:
        - 401 Unauthorized: Unknown email or wrong answer (indistinguishable)
        - 429 Too Many Requests: 3 attempts per IP per hour
    """
    use_case = VerifySecretAnswerByEmailUseCase(
        uow,
        token_service,
        hasher,
        rate_limiter,
        security_log,
        reset_token_ttl=timedelta(seconds=config.EMAIL_RESET_TOKEN_TTL_SECONDS),
    )
    result = await use_case.execute(request.email, request.secret_answer, client)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse[ResetTokenResponse](
        success=True, payload=result.value, message="Identity verified. A password reset token was issued."
    )


class UpdatePasswordRequest(CamelModel):
    new_password: str = Field(..., description="New password (ASCII, min 8 chars)")


@router.post(
    "/update-password",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[None],
    dependencies=[Depends(require_csrf)],
)
async def update_password(
    request: UpdatePasswordRequest,
    x_reset_token: Optional[str] = Header(None),
    bearer_token: Optional[str] = Depends(get_bearer_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
    security_log: SecurityLog = Depends(get_security_log),
    client: ClientInfo = Depends(get_client),
):
    """
    Update Password

    Authorized by an X-Reset-Token header (checked first when present) or a
    bearer session token.

    Raises:
        - 400 Bad Request: New password breaks the password policy
        - 401 Unauthorized: Invalid reset token / missing or invalid session
        - 403 Forbidden: CSRF check failed
    """
    use_case = UpdatePasswordUseCase(uow, token_service, hasher, security_log)
    result = await use_case.execute(
        request.new_password,
        client,
        reset_token=x_reset_token,
        session_token=bearer_token,
    )

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse[None](success=True, payload=None, message="Password updated successfully.")


class UpdateSecretQuestionRequest(CamelModel):
    secret_question_id: int = Field(..., description="New secret question id")
    secret_answer: str = Field(..., description="New secret answer")
    current_password: str = Field(..., description="Current password")


@router.put(
    "/update-secret-question",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[None],
    dependencies=[Depends(require_csrf)],
)
async def update_secret_question(
    request: UpdateSecretQuestionRequest,
    current_user: SessionClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    security_log: SecurityLog = Depends(get_security_log),
    client: ClientInfo = Depends(get_client),
):
    """
    Update Secret Question

    Raises:
        - 400 Bad Request: Invalid input
        - 401 Unauthorized: Missing/invalid session or wrong current password
        - 403 Forbidden: CSRF check failed
        - 404 Not Found: Secret question does not exist
        - 429 Too Many Requests: Rate limit exceeded
    """
    use_case = UpdateSecretQuestionUseCase(uow, hasher, rate_limiter, security_log)
    result = await use_case.execute(
        current_user,
        request.secret_question_id,
        request.secret_answer,
        request.current_password,
        client,
    )

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse[None](success=True, payload=None, message="Secret question updated successfully.")
