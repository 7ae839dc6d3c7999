"""Main layout: toolbar, navigation tree, list/search views and overlays.

Every interaction is a small POST that changes the per-session
:class:`~addressbook.services.ui_state.MainViewState` and redirects back to
``/``, which renders the current state.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for

from addressbook import config as app_config
from addressbook.db.repositories import cities_repo
from addressbook.i18n import get_message
from addressbook.security import get_user, login_required
from addressbook.services import contacts_service, search_service
from addressbook.services.main_view import BUTTONS, MainView, SearchSummary
from addressbook.services.ui_state import FORM_NEW, load_state, save_state
from addressbook.utils.logging import get_logger

LOG = get_logger("main_view_routes")

bp = Blueprint("main_view", __name__)


def flash_search_summary(summary: Optional[SearchSummary]) -> None:
    if summary is None:
        return
    flash(
        get_message(
            "search.result",
            summary.property_display_name,
            summary.term_display_name,
            summary.size,
        ),
        "tray",
    )


def form_error_messages(errors: Mapping[str, str]) -> Dict[str, str]:
    """Translate field -> message code into field -> display text."""
    messages: Dict[str, str] = {}
    for field_name, code in errors.items():
        if code == "form.error.required":
            header = get_message(contacts_service.required_field_header(field_name))
            messages[field_name] = get_message(code, header)
        else:
            messages[field_name] = get_message(code)
    return messages


def _selected_contact(view: MainView) -> Optional[Dict[str, Any]]:
    contact_id = view.state.selected_contact_id
    if contact_id is None or view.state.form_mode == FORM_NEW:
        return None
    try:
        return contacts_service.get_contact(contact_id)
    except contacts_service.ContactNotFoundError:
        LOG.debug("Selected contact %s vanished", contact_id)
        return None


def render_main_layout(
    view: MainView,
    *,
    form_values: Optional[Mapping[str, Any]] = None,
    form_errors: Optional[Mapping[str, str]] = None,
):
    state = view.state
    listing = contacts_service.list_page(
        view.container_predicate(),
        page=state.page,
        selected_id=state.selected_contact_id,
    )
    state.page = listing.page
    save_state(state)
    contact = _selected_contact(view)
    return render_template(
        "main.html",
        title=get_message("app.title", app_config.application_version()),
        user=get_user(),
        state=state,
        tree=view.tree.nodes(),
        listing=listing,
        columns=contacts_service.PROPERTIES,
        contact=contact,
        form_values=form_values if form_values is not None else (contact or {}),
        form_errors=form_errors or {},
        cities=cities_repo.list_cities(),
    )


@bp.route("/", methods=["GET"])
@login_required
def index():
    view = MainView(load_state())
    raw_page = request.args.get("page")
    if raw_page is not None:
        try:
            view.state.page = max(int(raw_page), 0)
        except ValueError:
            abort(400)
    return render_main_layout(view)


@bp.route("/toolbar/<button>", methods=["POST"])
@login_required
def toolbar(button: str):
    if button not in BUTTONS:
        abort(404)
    state = load_state()
    MainView(state).button_click(button)
    save_state(state)
    return redirect(url_for("main_view.index"))


@bp.route("/tree/select", methods=["POST"])
@login_required
def tree_select():
    state = load_state()
    view = MainView(state)
    try:
        flash_search_summary(view.item_click(request.form.get("item_id") or None))
    except search_service.SearchError as exc:
        flash(get_message(exc.code), "error")
    save_state(state)
    return redirect(url_for("main_view.index"))


@bp.route("/tree/toggle", methods=["POST"])
@login_required
def tree_toggle():
    state = load_state()
    tree = MainView(state).tree
    item_id = request.form.get("item_id") or ""
    if item_id in state.expanded:
        tree.collapse_item(item_id)
    elif tree.contains(item_id):
        tree.expand_item(item_id)
    save_state(state)
    return redirect(url_for("main_view.index"))


@bp.route("/overlay/close", methods=["POST"])
@login_required
def close_overlay():
    state = load_state()
    MainView(state).close_overlay()
    save_state(state)
    return redirect(url_for("main_view.index"))


def register_main_view(app: Any) -> None:
    if getattr(app, "_addressbook_main_view", False):
        return
    app.register_blueprint(bp)
    setattr(app, "_addressbook_main_view", True)
    LOG.debug("Main view blueprint registered")


__all__ = [
    "bp",
    "register_main_view",
    "render_main_layout",
    "flash_search_summary",
    "form_error_messages",
]
