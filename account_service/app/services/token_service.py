"""
Token Service

Mints and verifies the two kinds of signed bearer tokens:

- session tokens (``purpose=session``) authorize normal authenticated calls
- password-reset tokens (``purpose=password-reset``) authorize a single
  password update and nothing else

Verification always names the purpose it expects; a token of the other
purpose fails exactly like a forged or expired one.
"""

from datetime import UTC, datetime, timedelta
from typing import Annotated, Callable, Literal, Optional, Union

from jose import JWTError, jwt
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from account_service.domain.entities import Role, TokenPurpose
from account_service.libs.result import Error, Result, Return

SESSION_TOKEN_TTL = timedelta(hours=3)
RESET_TOKEN_TTL = timedelta(minutes=15)
EMAIL_RESET_TOKEN_TTL = timedelta(minutes=10)


class SessionClaims(BaseModel):
    """Decoded claims of a session token"""

    purpose: Literal["session"]
    sub: str
    role: Role
    iat: int
    exp: int


class ResetClaims(BaseModel):
    """Decoded claims of a password-reset token"""

    purpose: Literal["password-reset"]
    sub: str
    email: str
    iat: int
    exp: int


TokenClaims = Annotated[Union[SessionClaims, ResetClaims], Field(discriminator="purpose")]

_claims_adapter = TypeAdapter(TokenClaims)


def invalid_token_error() -> Error:
    return Error("INVALID_TOKEN", "Token is invalid or has expired")


class TokenService:
    """HS256 JWT minting and purpose-checked verification"""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        session_ttl: timedelta = SESSION_TOKEN_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.session_ttl = session_ttl
        self._clock = clock or (lambda: datetime.now(UTC))

    def _encode(self, claims: dict, lifetime: timedelta) -> str:
        issued_at = int(self._clock().timestamp())
        payload = {
            **claims,
            "iat": issued_at,
            "exp": issued_at + int(lifetime.total_seconds()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def mint_session(self, user_id, role: Role) -> str:
        """
        Mint a session token.

        Args:
            user_id: User UUID
            role: User role

        Returns:
            JWT string valid for ``session_ttl`` (3 hours by default)
        """
        return self._encode(
            {
                "purpose": TokenPurpose.session.value,
                "sub": str(user_id),
                "role": Role(role).value,
            },
            self.session_ttl,
        )

    def mint_reset(self, user_id, email: str, lifetime: timedelta = RESET_TOKEN_TTL) -> str:
        """
        Mint a password-reset token scoped to a single user.

        Args:
            user_id: User UUID
            email: User email, carried for the client's convenience
            lifetime: 15 minutes for the session path, 10 for the email path

        Returns:
            JWT string
        """
        return self._encode(
            {
                "purpose": TokenPurpose.password_reset.value,
                "sub": str(user_id),
                "email": email,
            },
            lifetime,
        )

    def decode(self, token: str) -> Optional[Union[SessionClaims, ResetClaims]]:
        """Check signature and expiry, returning typed claims or None"""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            return None
        # jose checks exp against the wall clock; re-check against ours
        if payload.get("exp", 0) <= int(self._clock().timestamp()):
            return None
        try:
            return _claims_adapter.validate_python(payload)
        except ValidationError:
            return None

    def verify(self, token: Optional[str], expected: TokenPurpose) -> Result:
        """
        Verify a token for one specific purpose.

        Returns:
            Result with SessionClaims or ResetClaims, or INVALID_TOKEN error
        """
        if not token:
            return Return.err(invalid_token_error())

        claims = self.decode(token)
        if claims is None or claims.purpose != TokenPurpose(expected).value:
            return Return.err(invalid_token_error())

        return Return.ok(claims)

    def verify_session(self, token: Optional[str]) -> Result[SessionClaims]:
        return self.verify(token, TokenPurpose.session)

    def verify_reset(self, token: Optional[str]) -> Result[ResetClaims]:
        return self.verify(token, TokenPurpose.password_reset)
