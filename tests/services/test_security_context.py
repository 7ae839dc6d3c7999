"""Security context holder tests: request start/end and store_user."""
from __future__ import annotations

import pytest
from flask import Flask, session

from addressbook.security import context
from addressbook.security.context import Authentication


@pytest.fixture
def flask_app():
    app = Flask(__name__)
    app.config["SECRET_KEY"] = "context-test-secret"
    return app


@pytest.fixture(autouse=True)
def clean_holder():
    context.clear_context()
    yield
    context.clear_context()


def test_transaction_start_copies_session_user_into_holder(flask_app):
    with flask_app.test_request_context("/"):
        session["user_id"] = 5
        session["username"] = "admin"
        session["roles"] = ["ROLE_USER", "ROLE_ADMIN"]

        context.transaction_start()

        auth = context.get_user()
        assert auth == Authentication("admin", 5, ("ROLE_USER", "ROLE_ADMIN"))
        assert context.current_authentication.principal == "admin"

        context.transaction_end()
        assert context.get_authentication() is None


def test_transaction_start_without_login_leaves_holder_empty(flask_app):
    with flask_app.test_request_context("/"):
        context.transaction_start()
        assert context.get_user() is None


def test_store_user_sets_and_clears_session_and_holder(flask_app):
    auth = Authentication("user", 9, ("ROLE_USER",))
    with flask_app.test_request_context("/"):
        context.store_user(auth)
        assert session["user_id"] == 9
        assert context.get_user() is auth

        context.store_user(None)
        assert "user_id" not in session
        assert context.get_user() is None


def test_register_security_context_is_idempotent(flask_app):
    context.register_security_context(flask_app)
    context.register_security_context(flask_app)

    assert flask_app.before_request_funcs[None].count(context.transaction_start) == 1
    assert flask_app.teardown_request_funcs[None].count(context.transaction_end) == 1
