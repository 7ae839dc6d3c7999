"""Search view submit: build filters, optionally save them, apply them."""
from __future__ import annotations

from typing import Any, Optional

from flask import Blueprint, flash, redirect, request, url_for

from addressbook.i18n import get_message
from addressbook.routes.main_view import flash_search_summary
from addressbook.security import login_required
from addressbook.services import contacts_service, search_service
from addressbook.services.main_view import BUTTON_SEARCH, MainView
from addressbook.services.ui_state import load_state, save_state
from addressbook.utils.logging import get_logger

LOG = get_logger("search_routes")

bp = Blueprint("search_view", __name__)


def _property_display_name(property_id: Optional[str]) -> str:
    if not property_id:
        return ""
    try:
        return get_message(contacts_service.get_property(property_id).header_code)
    except contacts_service.UnknownPropertyError:
        return property_id


@bp.route("/search", methods=["GET"])
@login_required
def show_search():
    state = load_state()
    MainView(state).button_click(BUTTON_SEARCH)
    save_state(state)
    return redirect(url_for("main_view.index"))


@bp.route("/search", methods=["POST"])
@login_required
def perform_search():
    state = load_state()
    view = MainView(state)
    property_id = request.form.get("field")
    save_requested = bool(request.form.get("save"))
    search_name = request.form.get("name")
    try:
        filters = search_service.build_search_filters(
            property_id,
            request.form.get("term"),
            search_name=search_name or "",
            property_display_name=_property_display_name(property_id),
        )
        search_service.require_search_name(save_requested, search_name)
        if not filters:
            flash(get_message("search.error.noMatch"), "warning")
        else:
            # Reject malformed terms before anything is stored in the tree.
            search_service.build_predicate(filters)
            if save_requested:
                view.save_search(filters)
            flash_search_summary(view.search(filters))
    except search_service.SearchError as exc:
        LOG.debug("Search rejected: %s", exc.code)
        flash(get_message(exc.code), "error")
    save_state(state)
    return redirect(url_for("main_view.index"))


def register_search(app: Any) -> None:
    if getattr(app, "_addressbook_search", False):
        return
    app.register_blueprint(bp)
    setattr(app, "_addressbook_search", True)
    LOG.debug("Search blueprint registered")


__all__ = ["bp", "register_search"]
