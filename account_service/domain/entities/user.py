"""
User Entity

Represents a person who can log in and recover their password through a
secret question.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import Role


class User(SQLModel, table=True):
    """
    User entity - identity record.

    Business Rules:
    - Email must be unique across all users (exact, case-sensitive match)
    - Password and secret answer stored as independent bcrypt hashes
    - about_slug is optional but unique when present
    - Password and secret answer only change through their own update flows
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    name: str = Field(max_length=255)
    role: Role = Field(default=Role.USER)

    # Public profile
    about_slug: Optional[str] = Field(default=None, unique=True, max_length=16)
    about_content: str = Field(default="", max_length=1000)

    # Password recovery
    secret_question_id: int = Field(foreign_key="secret_questions.id", index=True)
    secret_answer_hash: str = Field(max_length=60)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_user_role", "role"),)
