import pytest

from account_service.app.use_cases.auth.validation import (
    first_error,
    normalize_about_slug,
    validate_about_content,
    validate_about_slug,
    validate_email,
    validate_password,
    validate_question_id,
    validate_required,
    validate_role,
)
from account_service.domain.entities import Role


@pytest.mark.parametrize("password", ["abc12345", "Pass word!#$%"])
def test_valid_passwords(password):
    assert validate_password(password).is_ok()


@pytest.mark.parametrize("password", [None, "", "short7!", "パスワード12345678", "pässword123"])
def test_invalid_passwords(password):
    result = validate_password(password)

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    assert result.error.message.startswith("password:")


def test_password_error_names_custom_field():
    assert validate_password("x", "newPassword").error.details == {"field": "newPassword"}


def test_email_syntax():
    assert validate_email("grace@example.com").is_ok()
    assert validate_email("not-an-email").is_err()
    assert validate_email("").error.message == "email: is required"


def test_required():
    assert validate_required("x", "name").is_ok()
    assert validate_required("   ", "name").is_err()
    assert validate_required(None, "name").is_err()


@pytest.mark.parametrize("value,ok", [(1, True), (7, True), (0, False), (-1, False), (True, False), ("1", False)])
def test_question_id(value, ok):
    assert validate_question_id(value).is_ok() is ok


def test_about_slug_rules():
    assert normalize_about_slug("") is None
    assert validate_about_slug("").is_ok()
    assert validate_about_slug(None).is_ok()
    assert validate_about_slug("valid-slug1").is_ok()
    assert validate_about_slug("abc").is_err()
    assert validate_about_slug("UPPER").is_err()
    assert validate_about_slug("a" * 17).is_err()


def test_about_content_length():
    assert validate_about_content("x" * 1000).is_ok()
    assert validate_about_content("x" * 1001).is_err()


def test_role():
    assert validate_role(Role.ADMIN).is_ok()
    assert validate_role("USER").is_ok()
    assert validate_role("ROOT").is_err()


def test_first_error_returns_earliest_failure():
    error = first_error(
        validate_required("ok", "name"),
        validate_email("bad"),
        validate_password("bad"),
    )

    assert error.message.startswith("email:")
    assert first_error(validate_required("ok", "name")) is None
