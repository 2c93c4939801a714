import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from account_service.api.envelope import fail
from account_service.api.error import ClientError, ServerError
from account_service.api.middleware import SecurityHeadersMiddleware, apply_security_headers
from account_service.api.utils.client_info import get_client_info
from account_service.app.services.csrf import CsrfGuard
from account_service.app.services.password_hasher import PasswordHasher
from account_service.app.services.rate_limiter import RateLimiter
from account_service.app.services.security_log import SecurityEvent, SecurityLog
from account_service.app.services.token_service import TokenService
from account_service.domain.entities import SecurityLevel

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."


async def handle_client_error(request: Request, exc: ClientError):
    logger.warning(f"Client error: {exc.base_error.code} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content=fail(exc.base_error.message),
        headers=exc.headers,
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code} {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=fail(INTERNAL_ERROR_MESSAGE),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    fields = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        name = str(loc[-1]) if loc else "body"
        if name not in fields:
            fields.append(name)
    logger.info(f"Request validation failed on {request.url.path}: {fields}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=fail(f"Invalid input: {', '.join(fields)}"),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    client = get_client_info(request)
    request.app.state.security_log.record(
        SecurityLevel.ERROR,
        SecurityEvent.INTERNAL_ERROR,
        ip_address=client.ip_address,
        user_agent=client.user_agent,
        details={"path": request.url.path, "error": type(exc).__name__},
    )
    response = JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=fail(INTERNAL_ERROR_MESSAGE),
    )
    config = request.app.state.config
    if config.ENABLE_SECURITY_HEADERS:
        apply_security_headers(request.url.path, response.headers, config.HSTS_ENABLED)
    return response


async def _purge_rate_limits(rate_limiter: RateLimiter, interval_seconds: int):
    while True:
        await asyncio.sleep(interval_seconds)
        rate_limiter.cleanup()


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = app.state.config
    task = asyncio.create_task(
        _purge_rate_limits(app.state.rate_limiter, config.RATE_LIMIT_CLEANUP_INTERVAL_SECONDS)
    )
    try:
        yield
    finally:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Account Service", version="0.1.0", lifespan=lifespan)

    app.state.config = ApplicationConfig
    app.state.token_service = TokenService(
        ApplicationConfig.JWT_SECRET,
        algorithm=ApplicationConfig.JWT_ALGORITHM,
        session_ttl=timedelta(seconds=ApplicationConfig.SESSION_TOKEN_TTL_SECONDS),
    )
    app.state.password_hasher = PasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)
    app.state.rate_limiter = RateLimiter()
    app.state.security_log = SecurityLog(max_entries=ApplicationConfig.SECURITY_LOG_MAX_ENTRIES)
    app.state.csrf_guard = CsrfGuard(
        ApplicationConfig.CSRF_SECRET,
        max_age_seconds=ApplicationConfig.CSRF_TOKEN_MAX_AGE_SECONDS,
    )

    if ApplicationConfig.ENABLE_SECURITY_HEADERS:
        app.add_middleware(SecurityHeadersMiddleware, hsts_enabled=ApplicationConfig.HSTS_ENABLED)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from account_service.api.routes import auth, csrf, health_check, secret_questions, security_logs

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(secret_questions.router, prefix=prefix, tags=["Secret Questions"])
    app.include_router(csrf.router, prefix=prefix, tags=["CSRF"])
    app.include_router(security_logs.router, prefix=prefix, tags=["Security"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
