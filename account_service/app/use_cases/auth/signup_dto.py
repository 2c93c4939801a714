"""
Signup Use Case DTOs (Data Transfer Objects)

Command/Response pattern for clean architecture separation:
- SignupCommand: Input to use case (raw signup intent, validated by the use case)
- UserProfile: Output from use case (sanitized user)
"""

from pydantic import BaseModel


class SignupCommand(BaseModel):
    """
    Signup command - represents signup intent

    Signup may be invoked in-process as well as over HTTP, so the use case
    validates the command itself instead of trusting the caller.
    """

    name: str
    email: str
    password: str
    confirm_password: str
    secret_question_id: int
    secret_answer: str
