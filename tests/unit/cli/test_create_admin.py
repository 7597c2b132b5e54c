"""
Name: Admin Bootstrap Script Tests

Responsibilities:
  - First admin is created with a hashed password
  - Existing users are promoted/reactivated (idempotent)
  - --deactivate disables an account
  - Interactive run only asks name/password for new users
"""

import pytest

from postboard.identity.users import UserRole
from scripts import create_admin
from scripts.create_admin import deactivate, ensure_admin

pytestmark = pytest.mark.unit


def test_creates_admin(credential_store, user_repo):
    code = ensure_admin(
        credential_store, email="Root@Example.com", name="Root", password="secret1"
    )

    assert code == 0
    user = user_repo.get_user_by_email("root@example.com")
    assert user.role == UserRole.ADMIN
    assert user.password_hash != "secret1"


def test_invalid_input_is_rejected(credential_store, user_repo, capsys):
    code = ensure_admin(credential_store, email="bad", name="R", password="1")

    assert code == 1
    assert "email" in capsys.readouterr().out
    assert user_repo.get_user_by_email("bad") is None


def test_promotes_and_reactivates_existing_user(credential_store, make_user, user_repo):
    user = make_user(email="ana@x.com", is_active=False)

    code = ensure_admin(credential_store, email="ana@x.com", name="Ana", password="ignored")

    assert code == 0
    stored = user_repo.get_user_by_id(user.id)
    assert stored.role == UserRole.ADMIN
    assert stored.is_active is True


def test_deactivate(credential_store, make_user, user_repo):
    user = make_user(email="ana@x.com")

    assert deactivate(credential_store, "ana@x.com") == 0
    assert user_repo.get_user_by_id(user.id).is_active is False


def test_deactivate_unknown(credential_store):
    assert deactivate(credential_store, "nadie@x.com") == 1


@pytest.fixture
def offline_main(monkeypatch, credential_store):
    """main() contra el store en memoria, sin pool real."""
    monkeypatch.setattr(create_admin, "init_pool", lambda **kwargs: None)
    monkeypatch.setattr(create_admin, "close_pool", lambda: None)
    monkeypatch.setattr(create_admin, "reset_container", lambda: None)
    monkeypatch.setattr(create_admin, "get_credential_store", lambda: credential_store)
    return create_admin.main


def test_existing_user_is_not_asked_for_name_or_password(
    offline_main, monkeypatch, make_user, user_repo
):
    user = make_user(email="ana@x.com")
    asked = []

    def fake_prompt(label):
        asked.append(label)
        return "ana@x.com"

    def no_password():
        raise AssertionError("password prompt for an existing user")

    monkeypatch.setattr(create_admin, "_prompt", fake_prompt)
    monkeypatch.setattr(create_admin, "_prompt_password", no_password)

    assert offline_main([]) == 0
    assert asked == ["Email"]
    assert user_repo.get_user_by_id(user.id).role == UserRole.ADMIN


def test_new_user_is_prompted_for_name_and_password(offline_main, monkeypatch, user_repo):
    answers = {"Email": "root@x.com", "Name": "Root"}
    monkeypatch.setattr(create_admin, "_prompt", lambda label: answers[label])
    monkeypatch.setattr(create_admin, "_prompt_password", lambda: "secret1")

    assert offline_main([]) == 0
    assert user_repo.get_user_by_email("root@x.com").role == UserRole.ADMIN
