"""Authentication manager and account helper tests."""
from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from addressbook.db.engine import init_engine_once, reset_for_tests
from addressbook.db.repositories import users_repo
from addressbook.services import auth_service


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("ADDRESSBOOK_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_authenticate_returns_principal_with_authorities():
    auth_service.create_account("Admin", "s3cret", roles=(auth_service.ROLE_USER, auth_service.ROLE_ADMIN))

    authentication = auth_service.authentication_manager.authenticate("admin", "s3cret")

    assert authentication.principal == "admin"
    assert authentication.authenticated is True
    assert authentication.has_authority(auth_service.ROLE_ADMIN)
    assert str(authentication) == "admin ['ROLE_USER', 'ROLE_ADMIN']"


@pytest.mark.parametrize("username, password", [("user", "wrong"), ("ghost", "user"), ("", "x"), ("user", "")])
def test_bad_credentials(username, password):
    auth_service.create_account("user", "user")

    with pytest.raises(auth_service.BadCredentialsError) as excinfo:
        auth_service.authentication_manager.authenticate(username, password)
    assert str(excinfo.value) == "Bad credentials"


def test_disabled_user_is_rejected():
    users_repo.create_user(username="sleeper", password_hash=generate_password_hash("pw"), enabled=False)

    with pytest.raises(auth_service.DisabledUserError) as excinfo:
        auth_service.authentication_manager.authenticate("sleeper", "pw")
    assert str(excinfo.value) == "User is disabled"


def test_ensure_account_is_idempotent():
    assert auth_service.ensure_account("user", "user") is True
    assert auth_service.ensure_account("USER", "other") is False

    # the first password stays in place
    auth_service.authentication_manager.authenticate("user", "user")


def test_create_account_requires_username_and_password():
    with pytest.raises(ValueError):
        auth_service.create_account("  ", "pw")
    with pytest.raises(ValueError):
        auth_service.create_account("someone", "")
