from typing import Dict, Optional

from fastapi import status

from account_service.libs.result import Error

STATUS_BY_CODE = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "CONFLICT": status.HTTP_400_BAD_REQUEST,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "INVALID_ANSWER": status.HTTP_401_UNAUTHORIZED,
    "INVALID_TOKEN": status.HTTP_401_UNAUTHORIZED,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "RATE_LIMITED": status.HTTP_429_TOO_MANY_REQUESTS,
}


class ClientError(Exception):
    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.headers = headers
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def rate_limit_headers(error: Error) -> Dict[str, str]:
    details = error.details or {}
    return {
        "Retry-After": str(details.get("retry_after", 0)),
        "X-RateLimit-Remaining": str(details.get("remaining", 0)),
        "X-RateLimit-Reset": str(details.get("reset_time", 0)),
    }


def raise_for_error(error: Error):
    """Map a use case Error onto the matching HTTP exception"""
    status_code = STATUS_BY_CODE.get(error.code)
    if status_code is None:
        raise ServerError(error)
    headers = rate_limit_headers(error) if error.code == "RATE_LIMITED" else None
    raise ClientError(error, status_code=status_code, headers=headers)
