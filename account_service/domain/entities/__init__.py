"""
Account Service Domain Entities

All domain entities organized by model.
"""

from .enums import Role, SecurityLevel, TokenPurpose
from .secret_question import SecretQuestion
from .user import User

__all__ = [
    # Enums
    "Role",
    "SecurityLevel",
    "TokenPurpose",
    # Entities
    "SecretQuestion",
    "User",
]
