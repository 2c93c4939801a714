from abc import ABC, abstractmethod
from typing import List, Optional

from account_service.domain.entities import SecretQuestion


class ISecretQuestionRepository(ABC):
    """SecretQuestion repository interface - application layer"""

    @abstractmethod
    async def list_all(self) -> List[SecretQuestion]:
        """Get the whole catalog ordered by id ascending"""
        pass

    @abstractmethod
    async def get_by_id(self, question_id: int) -> Optional[SecretQuestion]:
        """Get a catalog entry by ID"""
        pass

    @abstractmethod
    async def create(self, question: SecretQuestion) -> SecretQuestion:
        """Create a catalog entry (seed tooling only)"""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete the whole catalog (seed tooling only). Returns deleted count."""
        pass
