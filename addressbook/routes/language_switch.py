"""Language switch endpoint for logged-in users and anonymous visitors."""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, redirect, request, session, url_for

from addressbook.db.repositories import users_repo
from addressbook.i18n.preferences import SESSION_LOCALE_KEY, SUPPORTED_LOCALES, normalize_locale_choice
from addressbook.utils.identity import get_current_user_id
from addressbook.utils.logging import get_logger

LOG = get_logger("language_switch")

bp = Blueprint("language_switch", __name__)


def _redirect_target() -> str:
    target = request.values.get("next") or ""
    if target.startswith("/") and not target.startswith("//"):
        return target
    return url_for("login_view.login_page") if get_current_user_id() is None else url_for("main_view.index")


@bp.route("/language/switch", methods=["POST"])
def switch_language():
    payload = request.get_json(silent=True) or {}
    raw_locale = payload.get("locale") or request.values.get("locale") or request.values.get("lang")
    normalized = normalize_locale_choice(raw_locale)
    if not normalized:
        return jsonify({"error": "unsupported_locale", "supported": list(SUPPORTED_LOCALES)}), 400

    session[SESSION_LOCALE_KEY] = normalized
    session.modified = True

    user_id = get_current_user_id()
    if user_id is not None:
        users_repo.update_locale(user_id, normalized)
        LOG.debug("Locale preference stored user_id=%s locale=%s", user_id, normalized)

    target = _redirect_target()
    if request.is_json:
        return jsonify({"status": "ok", "locale": normalized, "redirect": target})
    return redirect(target)


def register_language_switch(app: Any) -> None:
    if getattr(app, "_addressbook_language_switch", False):
        return
    app.register_blueprint(bp)
    setattr(app, "_addressbook_language_switch", True)
    LOG.debug("Language switch blueprint registered")


__all__ = ["register_language_switch", "bp"]
