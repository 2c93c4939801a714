"""
SecretQuestion Entity

Catalog of questions a user can pick as a password-recovery challenge.
"""

from typing import Optional

from sqlmodel import Field, SQLModel


class SecretQuestion(SQLModel, table=True):
    """
    SecretQuestion entity - catalog entry referenced by User.

    Business Rules:
    - Seeded once, never edited afterwards
    - Listed ordered by id ascending
    """

    __tablename__ = "secret_questions"

    id: Optional[int] = Field(default=None, primary_key=True)
    question: str = Field(max_length=255, nullable=False)
