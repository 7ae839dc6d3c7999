"""Tests for users_repo helpers using in-memory SQLite."""
from __future__ import annotations

import pytest

from addressbook.db.engine import init_engine_once, reset_for_tests
from addressbook.db.repositories import users_repo


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("ADDRESSBOOK_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_create_and_lookup_user_case_insensitive():
    created = users_repo.create_user(username="admin", password_hash="hash", roles=("ROLE_USER", "ROLE_ADMIN"))

    fetched = users_repo.get_user_by_username(" ADMIN ")
    assert fetched is not None
    assert fetched.id == created.id
    assert fetched.role_list() == ["ROLE_USER", "ROLE_ADMIN"]
    assert fetched.enabled is True


def test_duplicate_username_raises():
    users_repo.create_user(username="user", password_hash="hash")

    with pytest.raises(users_repo.UserExistsError):
        users_repo.create_user(username="user", password_hash="other")


def test_update_locale_persists_choice():
    user = users_repo.create_user(username="reader", password_hash="hash")

    assert users_repo.update_locale(user.id, "fi_FI") is True
    assert users_repo.get_user(user.id).locale == "fi_FI"
    assert users_repo.update_locale(12345, "fi_FI") is False
