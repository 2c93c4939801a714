"""
CSRF Token Guard

Double-submit tokens of the form ``timestamp:nonce:signature`` where the
signature is an HMAC-SHA256 over ``timestamp:nonce``. The token is handed to
the browser as a readable cookie and must be echoed back in the
``X-CSRF-Token`` header on state-changing requests.
"""

import hashlib
import hmac
import secrets
import time
from typing import Callable, Optional

CSRF_COOKIE_NAME = "csrfToken"
CSRF_HEADER_NAME = "X-CSRF-Token"
DELIMITER = ":"


class CsrfGuard:
    def __init__(
        self,
        secret: str,
        max_age_seconds: int = 3600,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._secret = secret.encode("utf-8")
        self.max_age_ms = max_age_seconds * 1000
        self._clock = clock or time.time

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _sign(self, payload: str) -> str:
        return hmac.new(self._secret, payload.encode("utf-8"), hashlib.sha256).hexdigest()

    def issue(self) -> str:
        timestamp = str(self._now_ms())
        nonce = secrets.token_hex(16)
        payload = f"{timestamp}{DELIMITER}{nonce}"
        return f"{payload}{DELIMITER}{self._sign(payload)}"

    def verify(self, token: Optional[str]) -> bool:
        if not token:
            return False

        parts = token.split(DELIMITER)
        if len(parts) != 3:
            return False

        timestamp, nonce, signature = parts
        # isdigit() alone admits characters like "²" that int() rejects
        if not (timestamp.isascii() and timestamp.isdigit()):
            return False

        if self._now_ms() - int(timestamp) > self.max_age_ms:
            return False

        expected = self._sign(f"{timestamp}{DELIMITER}{nonce}")
        return hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8"))

    def verify_double_submit(self, cookie_token: Optional[str], header_token: Optional[str]) -> bool:
        """Header and cookie must both be present, identical, and valid"""
        if not cookie_token or not header_token:
            return False
        if not hmac.compare_digest(cookie_token.encode("utf-8"), header_token.encode("utf-8")):
            return False
        return self.verify(header_token)
