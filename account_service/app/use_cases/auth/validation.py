"""
Input validation shared by signup, password update and the seed tool.

Each validator returns ``Return.ok(None)`` or a VALIDATION_ERROR whose
message starts with the offending field name.
"""

import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email as _validate_email_syntax

from account_service.domain.entities import Role
from account_service.libs.result import Error, Result, Return

PASSWORD_MIN_LENGTH = 8
ABOUT_CONTENT_MAX_LENGTH = 1000
ABOUT_SLUG_PATTERN = re.compile(r"^[a-z0-9-]{4,16}$")


def validation_error(field: str, message: str) -> Error:
    return Error("VALIDATION_ERROR", f"{field}: {message}", {"field": field})


def validate_password(password: Optional[str], field: str = "password") -> Result[None]:
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        return Return.err(
            validation_error(field, f"must be at least {PASSWORD_MIN_LENGTH} characters long")
        )
    if not password.isascii():
        return Return.err(validation_error(field, "must contain ASCII characters only"))
    return Return.ok(None)


def validate_email(email: Optional[str], field: str = "email") -> Result[None]:
    """Syntax check only; the address is stored exactly as given"""
    if not isinstance(email, str) or not email:
        return Return.err(validation_error(field, "is required"))
    try:
        _validate_email_syntax(email, check_deliverability=False)
    except EmailNotValidError:
        return Return.err(validation_error(field, "must be a valid email address"))
    return Return.ok(None)


def validate_required(value: Optional[str], field: str) -> Result[None]:
    if not isinstance(value, str) or not value.strip():
        return Return.err(validation_error(field, "is required"))
    return Return.ok(None)


def validate_question_id(question_id, field: str = "secretQuestionId") -> Result[None]:
    if isinstance(question_id, bool) or not isinstance(question_id, int) or question_id < 1:
        return Return.err(validation_error(field, "a secret question must be selected"))
    return Return.ok(None)


def normalize_about_slug(slug: Optional[str]) -> Optional[str]:
    return None if slug == "" else slug


def validate_about_slug(slug: Optional[str], field: str = "aboutSlug") -> Result[None]:
    slug = normalize_about_slug(slug)
    if slug is None:
        return Return.ok(None)
    if not ABOUT_SLUG_PATTERN.match(slug):
        return Return.err(
            validation_error(field, "must be 4-16 lowercase letters, digits or hyphens")
        )
    return Return.ok(None)


def validate_about_content(content: Optional[str], field: str = "aboutContent") -> Result[None]:
    if content is not None and len(content) > ABOUT_CONTENT_MAX_LENGTH:
        return Return.err(
            validation_error(field, f"must be at most {ABOUT_CONTENT_MAX_LENGTH} characters")
        )
    return Return.ok(None)


def validate_role(role, field: str = "role") -> Result[None]:
    try:
        Role(role)
    except ValueError:
        return Return.err(validation_error(field, "must be ADMIN or USER"))
    return Return.ok(None)


def first_error(*results: Result[None]) -> Optional[Error]:
    """First failing validation, in argument order"""
    for result in results:
        if result.is_err():
            return result.error
    return None
