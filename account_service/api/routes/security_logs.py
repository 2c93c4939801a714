"""
Security Log API Routes

Administrator read access to the in-memory security journal.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from account_service.api.envelope import ApiResponse
from account_service.api.error import raise_for_error
from account_service.app.services.security_log import SecurityLog, SecurityLogEntry
from account_service.app.services.token_service import SessionClaims
from account_service.app.use_cases.security import GetSecurityLogsUseCase
from account_service.depends import get_current_user, get_security_log
from account_service.domain.entities import SecurityLevel

router = APIRouter(tags=["Security"])


@router.get(
    "/security-logs",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[List[SecurityLogEntry]],
)
async def get_security_logs(
    current_user: SessionClaims = Depends(get_current_user),
    security_log: SecurityLog = Depends(get_security_log),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of entries to return"),
    level: Optional[SecurityLevel] = Query(None, description="Only entries of this level"),
):
    """
    Get Security Logs

    Query Parameters:
        - limit: Maximum number of entries (1-1000, default 100)
        - level: INFO | WARNING | ERROR | CRITICAL

    Returns:
        Entries ordered newest first

    Raises:
        - 401 Unauthorized: Missing or invalid session token
        - 403 Forbidden: Caller is not an ADMIN
    """
    use_case = GetSecurityLogsUseCase(security_log)
    result = await use_case.execute(role=current_user.role, limit=limit, level=level)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse[List[SecurityLogEntry]](success=True, payload=result.value, message="")
