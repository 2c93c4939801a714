"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the auth domain.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from account_service.app.services.rate_limiter import RateLimitResult
from account_service.libs.result import Error

UNKNOWN_IP = "unknown-ip"
UNKNOWN_USER_AGENT = "unknown-user-agent"


@dataclass(frozen=True)
class ClientInfo:
    """Who is calling - used for rate limit keys and audit entries"""

    ip_address: str = UNKNOWN_IP
    user_agent: Optional[str] = UNKNOWN_USER_AGENT


def rate_limited_error(limit: RateLimitResult) -> Error:
    retry_after = limit.retry_after if limit.retry_after is not None else 0
    return Error(
        "RATE_LIMITED",
        f"Too many attempts. Please try again in {retry_after} seconds.",
        {
            "retry_after": retry_after,
            "remaining": limit.remaining,
            "reset_time": limit.reset_time,
        },
    )


# ============================================================================
# Response DTOs
# ============================================================================


class UserProfile(BaseModel):
    """Sanitized user - never carries password or secret answer hashes"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    email: str
    role: str
    about_slug: Optional[str] = None
    about_content: str = ""


class ResetTokenResponse(BaseModel):
    """Response for secret answer verification use cases"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    reset_token: str
