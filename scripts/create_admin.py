"""
Name: Admin Bootstrap Script

Responsibilities:
  - Create the first admin user (idempotent)
  - Promote/reactivate an existing user to admin
  - Deactivate a user (--deactivate EMAIL); their tokens stop working
  - Reuse CredentialStore (same validators + Argon2 hashing as the API)
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from postboard.container import get_credential_store, reset_container  # noqa: E402
from postboard.crosscutting.config import get_settings  # noqa: E402
from postboard.domain.validation import validate_registration  # noqa: E402
from postboard.identity.credentials import CredentialStore  # noqa: E402
from postboard.identity.users import UserRole  # noqa: E402
from postboard.infrastructure.db.pool import close_pool, init_pool  # noqa: E402


def _prompt(label: str) -> str:
    value = input(f"{label}: ").strip()
    if not value:
        raise SystemExit(f"{label} is required.")
    return value


def _prompt_password() -> str:
    password = getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password is required.")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        raise SystemExit("Passwords do not match.")
    return password


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == "--":
        argv = argv[1:]
    parser = argparse.ArgumentParser(
        description="Create (or promote) an admin user, or deactivate a user."
    )
    parser.add_argument("--email", help="User email (will be normalized)")
    parser.add_argument("--name", help="Display name for a new user")
    parser.add_argument(
        "--password",
        help="User password (omit to be prompted securely)",
    )
    parser.add_argument(
        "--deactivate",
        metavar="EMAIL",
        help="Deactivate the user with this email and exit",
    )
    return parser.parse_args(argv)


def deactivate(store: CredentialStore, email: str) -> int:
    user = store.find_by_email(email)
    if user is None:
        print(f"User not found: {email}")
        return 1
    store.set_active(user.id, False)
    print(f"Deactivated user: id={user.id} email={user.email}")
    return 0


def ensure_admin(
    store: CredentialStore, *, email: str, name: str = "", password: str = ""
) -> int:
    """Promueve o reactiva si el email existe; si no, crea el admin."""
    existing = store.find_by_email(email)
    if existing is not None:
        if existing.role != UserRole.ADMIN:
            store.promote_to_admin(existing.id)
        if not existing.is_active:
            store.set_active(existing.id, True)
        print(f"Admin ready: id={existing.id} email={existing.email}")
        return 0

    errors = validate_registration(name, email, password)
    if errors:
        for error in errors:
            print(f"{error.field}: {error.message}")
        return 1

    result = asyncio.run(store.register(name, email, password, role=UserRole.ADMIN))
    if result.error is not None:
        print(f"Could not create admin: {result.error.message}")
        return 1
    print(f"Created admin: id={result.user.id} email={result.user.email}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    init_pool(
        database_url=settings.database_url,
        min_size=1,
        max_size=2,
        statement_timeout_ms=settings.db_statement_timeout_ms,
    )
    try:
        store = get_credential_store()
        if args.deactivate:
            return deactivate(store, args.deactivate)

        email = args.email or _prompt("Email")
        # R: name/password solo hacen falta para un usuario nuevo.
        if store.find_by_email(email) is not None:
            return ensure_admin(store, email=email)
        name = args.name or _prompt("Name")
        password = args.password or _prompt_password()
        return ensure_admin(store, email=email, name=name, password=password)
    finally:
        reset_container()
        close_pool()


if __name__ == "__main__":
    raise SystemExit(main())
