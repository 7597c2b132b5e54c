"""
Name: Input Validator Tests

Responsibilities:
  - Registration/login/post validators return structured FieldErrors
  - Email normalization
"""

import pytest

from postboard.domain.validation import (
    normalize_email,
    validate_email,
    validate_login,
    validate_post_fields,
    validate_registration,
)

pytestmark = pytest.mark.unit


def _fields(errors):
    return [e.field for e in errors]


class TestRegistration:
    def test_valid_registration_has_no_errors(self):
        assert validate_registration("Ana", "ana@example.com", "secret1") == []

    def test_short_name_and_password_are_reported(self):
        errors = validate_registration("A", "ana@example.com", "123")
        assert _fields(errors) == ["name", "password"]

    def test_name_is_trimmed_before_length_check(self):
        errors = validate_registration("  A  ", "ana@example.com", "secret1")
        assert _fields(errors) == ["name"]

    def test_missing_everything(self):
        errors = validate_registration(None, None, None)
        assert _fields(errors) == ["name", "email", "password"]


class TestEmail:
    def test_normalize_trims_and_lowercases(self):
        assert normalize_email("  A@X.Com ") == "a@x.com"

    @pytest.mark.parametrize("email", ["", "no-at", "a@b", "a @b.com"])
    def test_invalid_emails(self, email):
        assert _fields(validate_email(email)) == ["email"]

    def test_login_requires_password(self):
        errors = validate_login("a@x.com", "")
        assert _fields(errors) == ["password"]


class TestPostFields:
    def test_full_validation_requires_both_fields(self):
        errors = validate_post_fields(None, None)
        assert _fields(errors) == ["title", "description"]

    def test_title_minimum_message_is_spanish(self):
        errors = validate_post_fields("ab", "descripción suficientemente larga")
        assert errors[0].message == "El título debe tener al menos 3 caracteres."

    def test_partial_only_checks_provided_fields(self):
        assert validate_post_fields(None, None, partial=True) == []
        errors = validate_post_fields(None, "corta", partial=True)
        assert _fields(errors) == ["description"]
