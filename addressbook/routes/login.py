"""Login view and logout.

A successful login stores the principal in the session and the security
context and starts from a fresh main layout showing the list view.
"""
from __future__ import annotations

from typing import Any, Optional

from flask import Blueprint, flash, redirect, render_template, request, session, url_for

from addressbook import config as app_config
from addressbook.db.repositories import users_repo
from addressbook.i18n import get_message
from addressbook.i18n.preferences import SESSION_LOCALE_KEY, normalize_locale_choice
from addressbook.security import get_user, store_user
from addressbook.services.auth_service import AuthenticationError, authentication_manager
from addressbook.services.main_view import MainView
from addressbook.services.ui_state import MainViewState, reset_state, save_state
from addressbook.utils.logging import get_logger

LOG = get_logger("login")

bp = Blueprint("login_view", __name__)


def _sanitize_next(raw_target: Optional[str]) -> str:
    if raw_target and raw_target.startswith("/") and not raw_target.startswith("//"):
        return raw_target
    return url_for("main_view.index")


def _render_login(username: str = "", status: int = 200):
    return (
        render_template(
            "login.html",
            title=get_message("app.title", app_config.application_version()),
            username=username,
            next_target=request.values.get("next") or "",
        ),
        status,
    )


@bp.route("/login", methods=["GET"])
def login_page():
    if get_user() is not None:
        return redirect(_sanitize_next(request.args.get("next")))
    return _render_login()


@bp.route("/login", methods=["POST"])
def login_submit():
    username = (request.form.get("username") or "").strip()
    password = request.form.get("password") or ""
    if not username or not password:
        flash(get_message("login.missing"), "error")
        return _render_login(username)
    try:
        authentication = authentication_manager.authenticate(username, password)
    except AuthenticationError as exc:
        flash(get_message("login.failed", str(exc)), "error")
        return _render_login(username)

    store_user(authentication)
    LOG.info("Login succeeded username=%s", authentication.principal)

    chosen_locale = normalize_locale_choice(request.form.get("locale"))
    if chosen_locale:
        session[SESSION_LOCALE_KEY] = chosen_locale
        users_repo.update_locale(authentication.user_id, chosen_locale)

    reset_state()
    state = MainViewState()
    MainView(state).show_list_view()
    save_state(state)
    return redirect(_sanitize_next(request.form.get("next")))


@bp.route("/logout", methods=["POST"])
def logout():
    user = get_user()
    store_user(None)
    reset_state()
    LOG.info("Logout username=%s", user.principal if user else "-")
    return redirect(url_for("login_view.login_page"))


def register_login(app: Any) -> None:
    if getattr(app, "_addressbook_login", False):
        return
    app.register_blueprint(bp)
    setattr(app, "_addressbook_login", True)
    LOG.debug("Login blueprint registered")


__all__ = ["bp", "register_login"]
