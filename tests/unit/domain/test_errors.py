"""
Name: Domain Error Tests
"""

import pytest

from postboard.domain.errors import DomainError, DomainErrorCode, FieldError

pytestmark = pytest.mark.unit


def test_validation_error_carries_field_errors():
    error = DomainError.validation([FieldError("title", "muy corto")])
    assert error.code == DomainErrorCode.VALIDATION_ERROR
    assert [fe.to_dict() for fe in error.field_errors] == [
        {"field": "title", "message": "muy corto"}
    ]


def test_not_found_keeps_resource_name():
    error = DomainError.not_found("Post")
    assert error.code == DomainErrorCode.NOT_FOUND
    assert error.resource == "Post"
