"""
Secret Question API Routes

Catalog listing and the per-user / per-email question lookups used by
password recovery.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from account_service.api.envelope import ApiResponse
from account_service.api.error import raise_for_error
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityLog
from account_service.app.services.token_service import SessionClaims
from account_service.app.services.unit_of_work import UnitOfWork
from account_service.app.use_cases.auth import ClientInfo
from account_service.app.use_cases.secret_questions import (
    GetSecretQuestionByEmailUseCase,
    GetUserSecretQuestionUseCase,
    ListSecretQuestionsUseCase,
    SecretQuestionInfo,
)
from account_service.depends import (
    get_client,
    get_config,
    get_current_user,
    get_rate_limiter,
    get_security_log,
    get_unit_of_work,
)

router = APIRouter(tags=["Secret Questions"])


@router.get(
    "/secret-questions",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[List[SecretQuestionInfo]],
)
async def list_secret_questions(uow: UnitOfWork = Depends(get_unit_of_work)):
    """All selectable secret questions, ordered by id"""
    result = await ListSecretQuestionsUseCase(uow).execute()

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse[List[SecretQuestionInfo]](success=True, payload=result.value, message="")


@router.get(
    "/user-secret-question",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[SecretQuestionInfo],
)
async def get_user_secret_question(
    current_user: SessionClaims = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Secret question of the logged-in user

    Raises:
        - 401 Unauthorized: Missing or invalid session token
        - 404 Not Found: User or question no longer exists
    """
    result = await GetUserSecretQuestionUseCase(uow).execute(UUID(current_user.sub))

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse[SecretQuestionInfo](success=True, payload=result.value, message="")


@router.get(
    "/user-secret-question-by-email",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[SecretQuestionInfo],
)
async def get_secret_question_by_email(
    email: str = Query(..., description="Account email address"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    security_log: SecurityLog = Depends(get_security_log),
    client: ClientInfo = Depends(get_client),
    config=Depends(get_config),
):
    """
    Secret question for an email (anonymous recovery, step 1)

    Unknown emails receive a stable decoy question, so the response does not
    reveal whether an account exists.

    Raises:
        - 400 Bad Request: Empty email
        - 429 Too Many Requests: 60 lookups per IP per minute
    """
    use_case = GetSecretQuestionByEmailUseCase(
        uow, rate_limiter, security_log, decoy_secret=config.JWT_SECRET
    )
    result = await use_case.execute(email, client)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse[SecretQuestionInfo](success=True, payload=result.value, message="")
