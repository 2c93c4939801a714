from typing import Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from account_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from account_service.api.error import ClientError
from account_service.api.utils.client_info import get_client_info
from account_service.app.services.csrf import CSRF_COOKIE_NAME, CSRF_HEADER_NAME, CsrfGuard
from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityEvent, SecurityLog
from account_service.app.services.token_service import SessionClaims, TokenService
from account_service.app.use_cases.auth.dtos import ClientInfo
from account_service.domain.entities import SecurityLevel
from account_service.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


# Process-wide services are created once in create_app and kept on app.state


def get_config(request: Request):
    return request.app.state.config


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_security_log(request: Request) -> SecurityLog:
    return request.app.state.security_log


def get_csrf_guard(request: Request) -> CsrfGuard:
    return request.app.state.csrf_guard


def get_client(request: Request) -> ClientInfo:
    return get_client_info(request)


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Raw bearer token, or None when the Authorization header is absent"""
    if credentials is None:
        return None
    return credentials.credentials


async def get_current_user(
    token: Optional[str] = Depends(get_bearer_token),
    token_service: TokenService = Depends(get_token_service),
    security_log: SecurityLog = Depends(get_security_log),
    client: ClientInfo = Depends(get_client),
) -> SessionClaims:
    """
    Dependency to extract and verify the session token from the Authorization header.

    Returns:
        Verified session claims (sub, role, iat, exp)

    Raises:
        ClientError: 401 if the token is missing, invalid, expired, or a
            password-reset token
    """
    result = token_service.verify_session(token)

    if result.is_err():
        security_log.record(
            SecurityLevel.WARNING,
            SecurityEvent.UNAUTHORIZED_ACCESS if token is None else SecurityEvent.JWT_TOKEN_INVALID,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
        )
        raise ClientError(
            Error("UNAUTHORIZED", "Authentication is invalid. Please log in again."),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return result.value


async def require_csrf(
    request: Request,
    config=Depends(get_config),
    guard: CsrfGuard = Depends(get_csrf_guard),
    security_log: SecurityLog = Depends(get_security_log),
    client: ClientInfo = Depends(get_client),
) -> None:
    """
    Double-submit check: the X-CSRF-Token header must match the csrfToken
    cookie and carry a valid, unexpired signature.
    """
    if not config.CSRF_PROTECTION_ENABLED:
        return

    cookie_token = request.cookies.get(CSRF_COOKIE_NAME)
    header_token = request.headers.get(CSRF_HEADER_NAME)

    if not guard.verify_double_submit(cookie_token, header_token):
        security_log.record(
            SecurityLevel.WARNING,
            SecurityEvent.CSRF_TOKEN_INVALID,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
            details={"path": request.url.path, "header_present": header_token is not None},
        )
        raise ClientError(
            Error("FORBIDDEN", "The CSRF token is missing or invalid."),
            status_code=status.HTTP_403_FORBIDDEN,
        )
