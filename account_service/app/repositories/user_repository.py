from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from account_service.domain.entities import User


class EmailAlreadyRegistered(Exception):
    """Raised when the store's unique constraint rejects a duplicate email"""


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (exact match)"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Create a new user.

        Raises:
            EmailAlreadyRegistered: email (or slug) collides with an existing row
        """
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every user (seed tooling only). Returns deleted count."""
        pass
