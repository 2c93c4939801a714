"""
Security Audit Log

Bounded, append-only journal of security-relevant events kept in process
memory. Entries are mirrored to the ``account_service.security`` logger at
their own severity. Nothing survives a restart; this is operational
visibility, not a compliance trail.
"""

import itertools
import logging
from collections import deque
from datetime import UTC, datetime
from typing import Any, Deque, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from account_service.domain.entities import SecurityLevel

security_logger = logging.getLogger("account_service.security")

MAX_ENTRIES = 1000

_LOG_LEVELS = {
    SecurityLevel.INFO: logging.INFO,
    SecurityLevel.WARNING: logging.WARNING,
    SecurityLevel.ERROR: logging.ERROR,
    SecurityLevel.CRITICAL: logging.CRITICAL,
}


class SecurityEvent:
    """Event names recorded by the action handlers"""

    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILURE = "login_failure"
    LOGIN_RATE_LIMIT = "login_rate_limit"

    SIGNUP_SUCCESS = "signup_success"
    SIGNUP_FAILURE = "signup_failure"

    SECRET_ANSWER_VERIFIED = "secret_answer_verified"
    SECRET_ANSWER_FAILURE = "secret_answer_failure"
    PASSWORD_RESET_REQUEST = "password_reset_request"
    PASSWORD_CHANGE = "password_change"
    PASSWORD_CHANGE_FAILURE = "password_change_failure"
    SECRET_QUESTION_CHANGE = "secret_question_change"
    SECRET_QUESTION_CHANGE_FAILURE = "secret_question_change_failure"

    CSRF_TOKEN_INVALID = "csrf_token_invalid"
    JWT_TOKEN_INVALID = "jwt_token_invalid"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    UNAUTHORIZED_ACCESS = "unauthorized_access"

    INTERNAL_ERROR = "internal_error"


class SecurityLogEntry(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    level: SecurityLevel
    event: str
    user_id: Optional[str] = None
    ip_address: str
    user_agent: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SecurityLog:
    def __init__(self, max_entries: int = MAX_ENTRIES):
        self.max_entries = max_entries
        self._entries: Deque[SecurityLogEntry] = deque(maxlen=max_entries)
        self._ids = itertools.count(1)

    def record(
        self,
        level: SecurityLevel,
        event: str,
        ip_address: str,
        user_id: Optional[Any] = None,
        user_agent: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> SecurityLogEntry:
        """
        Append an entry, evicting the oldest once the journal is full.

        Args:
            level: Severity
            event: Event name, see SecurityEvent
            ip_address: Client IP
            user_id: Subject of the event, when known
            user_agent: Client user agent
            details: Structured context; never put secrets here

        Returns:
            The stored entry with its assigned id and timestamp
        """
        level = SecurityLevel(level)
        entry = SecurityLogEntry(
            id=next(self._ids),
            level=level,
            event=event,
            user_id=str(user_id) if user_id is not None else None,
            ip_address=ip_address,
            user_agent=user_agent,
            details=details,
        )
        self._entries.append(entry)

        message = f"[SECURITY {level.value}] {event} - IP: {ip_address}"
        if entry.user_id:
            message += f" - User: {entry.user_id}"
        security_logger.log(_LOG_LEVELS[level], "%s %s", message, details or "")

        return entry

    def query(self, limit: int = 100, level: Optional[SecurityLevel] = None) -> List[SecurityLogEntry]:
        """Newest entries first, optionally only those of one level"""
        entries = self._entries
        if level is not None:
            level = SecurityLevel(level)
            entries = [e for e in entries if e.level == level]
        ordered = sorted(entries, key=lambda e: (e.timestamp, e.id), reverse=True)
        return ordered[:limit]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
