"""
Secret Question Use Cases

Catalog listing and per-user question lookups.
"""

from .dtos import SecretQuestionInfo
from .get_secret_question_by_email_use_case import GetSecretQuestionByEmailUseCase
from .get_user_secret_question_use_case import GetUserSecretQuestionUseCase
from .list_secret_questions_use_case import ListSecretQuestionsUseCase

__all__ = [
    "ListSecretQuestionsUseCase",
    "GetUserSecretQuestionUseCase",
    "GetSecretQuestionByEmailUseCase",
    "SecretQuestionInfo",
]
