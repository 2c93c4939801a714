"""
Account Service Domain Enums

All enumeration types used across domain entities and services.
"""

from enum import Enum


class Role(str, Enum):
    """User role"""

    ADMIN = "ADMIN"
    USER = "USER"


class TokenPurpose(str, Enum):
    """Purpose claim carried by every signed bearer token"""

    session = "session"
    password_reset = "password-reset"


class SecurityLevel(str, Enum):
    """Severity of a security log entry"""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
