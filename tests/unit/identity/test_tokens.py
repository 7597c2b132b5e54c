"""
Name: Token Service Tests

Responsibilities:
  - issue/verify round trip (HS256)
  - Expired, tampered and malformed tokens map to TokenErrorKind
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from postboard.identity.tokens import TokenError, TokenErrorKind, TokenService

pytestmark = pytest.mark.unit

SECRET = "unit-test-secret-0123456789-abcdefghij"


def _service(**kwargs) -> TokenService:
    return TokenService(secret=SECRET, ttl_seconds=60, **kwargs)


class TestTokenService:
    def test_issue_then_verify_returns_user_id(self):
        service = _service()
        user_id = uuid4()
        issued = service.issue(user_id)
        assert issued.expires_in == 60
        assert service.verify(issued.token) == user_id

    def test_token_past_ttl_is_expired(self):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        issued = _service(clock=lambda: past).issue(uuid4())
        with pytest.raises(TokenError) as exc_info:
            _service().verify(issued.token)
        assert exc_info.value.kind == TokenErrorKind.EXPIRED

    def test_token_signed_with_other_secret_is_rejected(self):
        other = TokenService(secret="another-secret-0123456789-abcdefghij", ttl_seconds=60)
        token = other.issue(uuid4()).token
        with pytest.raises(TokenError) as exc_info:
            _service().verify(token)
        assert exc_info.value.kind == TokenErrorKind.INVALID_SIGNATURE

    @pytest.mark.parametrize("token", ["", "abc", "a.b.c"])
    def test_garbage_is_malformed(self, token):
        with pytest.raises(TokenError) as exc_info:
            _service().verify(token)
        assert exc_info.value.kind == TokenErrorKind.MALFORMED

    def test_non_uuid_subject_is_malformed(self):
        now = int(datetime.now(timezone.utc).timestamp())
        token = jwt.encode(
            {"sub": "not-a-uuid", "iat": now, "exp": now + 60, "typ": "access"},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(TokenError) as exc_info:
            _service().verify(token)
        assert exc_info.value.kind == TokenErrorKind.MALFORMED

    def test_rejects_empty_secret(self):
        with pytest.raises(ValueError):
            TokenService(secret="", ttl_seconds=60)
