from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from account_service.api.envelope import ApiResponse
from account_service.app.services.csrf import CSRF_COOKIE_NAME, CsrfGuard
from account_service.depends import get_config, get_csrf_guard

router = APIRouter(tags=["CSRF"])


class CsrfTokenResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    csrf_token: str


@router.get(
    "/csrf-token",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[CsrfTokenResponse],
)
async def issue_csrf_token(
    response: Response,
    guard: CsrfGuard = Depends(get_csrf_guard),
    config=Depends(get_config),
):
    """
    Issue a CSRF token

    The token is returned in the payload and set as a script-readable cookie;
    mutating requests echo it back in the X-CSRF-Token header.
    """
    token = guard.issue()
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=token,
        max_age=config.CSRF_TOKEN_MAX_AGE_SECONDS,
        path="/",
        httponly=False,
        secure=config.COOKIE_SECURE,
        samesite="strict",
    )
    return ApiResponse[CsrfTokenResponse](
        success=True, payload=CsrfTokenResponse(csrf_token=token), message=""
    )
