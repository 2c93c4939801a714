"""
Authentication Use Cases

All authentication and account recovery business logic.
"""

from .dtos import ClientInfo, ResetTokenResponse, UserProfile
from .login_use_case import LoginUseCase
from .signup_dto import SignupCommand
from .signup_use_case import SignupUseCase
from .update_password_use_case import UpdatePasswordUseCase
from .update_secret_question_use_case import UpdateSecretQuestionUseCase
from .verify_secret_answer_by_email_use_case import VerifySecretAnswerByEmailUseCase
from .verify_secret_answer_use_case import VerifySecretAnswerUseCase

__all__ = [
    # Use Cases
    "SignupUseCase",
    "LoginUseCase",
    "VerifySecretAnswerUseCase",
    "VerifySecretAnswerByEmailUseCase",
    "UpdatePasswordUseCase",
    "UpdateSecretQuestionUseCase",
    # DTOs - Commands
    "SignupCommand",
    # DTOs - Responses
    "UserProfile",
    "ResetTokenResponse",
    # DTOs - Context
    "ClientInfo",
]
