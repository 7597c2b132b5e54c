"""
Name: CredentialStore Tests

Responsibilities:
  - Registration: validation, normalization, case-insensitive uniqueness
  - Login: generic Unauthenticated for unknown user / wrong password / inactive
  - Deactivation invalidates previously issued tokens (via AccessControlGate)
"""

from uuid import uuid4

import pytest

from postboard.domain.errors import DomainErrorCode
from postboard.identity.users import UserRole

pytestmark = pytest.mark.unit


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_normalizes_email_and_hashes(self, credential_store):
        result = await credential_store.register("Ana", "A@X.com", "secret1")

        assert result.error is None
        assert result.user.email == "a@x.com"
        assert result.user.role == UserRole.USER
        assert result.user.is_active is True
        assert result.user.password_hash != "secret1"

    @pytest.mark.asyncio
    async def test_duplicate_email_in_any_case_is_rejected(self, credential_store):
        await credential_store.register("Ana", "A@X.com", "secret1")

        result = await credential_store.register("Ana Bis", "a@x.com", "secret2")

        assert result.user is None
        assert result.error.code == DomainErrorCode.DUPLICATE_EMAIL

    @pytest.mark.asyncio
    async def test_invalid_input_returns_field_errors(self, credential_store):
        result = await credential_store.register("A", "bad", "1")

        assert result.error.code == DomainErrorCode.VALIDATION_ERROR
        assert {fe.field for fe in result.error.field_errors} == {
            "name",
            "email",
            "password",
        }


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_registered_user_can_log_in_and_token_is_accepted(
        self, credential_store, tokens, gate
    ):
        await credential_store.register("Ana", "ana@example.com", "secret1")

        result = await credential_store.authenticate("ANA@example.com", "secret1")
        assert result.error is None

        auth = gate.authenticate(tokens.issue(result.user.id).token)
        assert auth.user.id == result.user.id

    @pytest.mark.asyncio
    async def test_wrong_password_is_unauthenticated(self, credential_store):
        await credential_store.register("Ana", "ana@example.com", "secret1")

        result = await credential_store.authenticate("ana@example.com", "wrong-pass")

        assert result.error.code == DomainErrorCode.UNAUTHENTICATED
        assert result.error.message == "Credenciales inválidas."

    @pytest.mark.asyncio
    async def test_unknown_email_gets_same_generic_error(self, credential_store):
        result = await credential_store.authenticate("ghost@example.com", "secret1")

        assert result.error.code == DomainErrorCode.UNAUTHENTICATED
        assert result.error.message == "Credenciales inválidas."

    @pytest.mark.asyncio
    async def test_inactive_user_cannot_log_in(self, credential_store):
        registered = await credential_store.register("Ana", "ana@example.com", "secret1")
        credential_store.set_active(registered.user.id, False)

        result = await credential_store.authenticate("ana@example.com", "secret1")

        assert result.error.code == DomainErrorCode.UNAUTHENTICATED


class TestAdministration:
    @pytest.mark.asyncio
    async def test_deactivation_invalidates_existing_tokens(
        self, credential_store, tokens, gate
    ):
        registered = await credential_store.register("Ana", "ana@example.com", "secret1")
        token = tokens.issue(registered.user.id).token
        assert gate.authenticate(token).error is None

        credential_store.set_active(registered.user.id, False)

        auth = gate.authenticate(token)
        assert auth.user is None
        assert auth.error.code == DomainErrorCode.UNAUTHENTICATED

    def test_set_active_unknown_user_is_not_found(self, credential_store):
        result = credential_store.set_active(uuid4(), False)
        assert result.error.code == DomainErrorCode.NOT_FOUND

    def test_promote_to_admin(self, credential_store, make_user):
        user = make_user()
        result = credential_store.promote_to_admin(user.id)
        assert result.user.role == UserRole.ADMIN
