"""Person list selection and the person form (new, edit, save, cancel, delete)."""
from __future__ import annotations

from typing import Any, Optional

from flask import Blueprint, flash, redirect, request, url_for

from addressbook.i18n import get_message
from addressbook.routes.main_view import form_error_messages, render_main_layout
from addressbook.security import login_required
from addressbook.services import contacts_service
from addressbook.services.main_view import MainView
from addressbook.services.ui_state import FORM_NEW, load_state, save_state
from addressbook.utils.logging import get_logger

LOG = get_logger("contacts_routes")

bp = Blueprint("contacts", __name__, url_prefix="/contacts")


def _optional_int(raw: Any) -> Optional[int]:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _back_to_main():
    return redirect(url_for("main_view.index"))


@bp.route("/<int:contact_id>/select", methods=["POST"])
@login_required
def select_contact(contact_id: int):
    state = load_state()
    view = MainView(state)
    if contacts_service.contains_id(contact_id, view.container_predicate()):
        view.select_contact(contact_id)
    else:
        flash(get_message("form.notFound"), "warning")
        view.fix_visible_and_selected_item()
    save_state(state)
    return _back_to_main()


@bp.route("/new", methods=["POST"])
@login_required
def new_contact():
    state = load_state()
    MainView(state).add_new_contact()
    save_state(state)
    return _back_to_main()


@bp.route("/edit", methods=["POST"])
@login_required
def edit_contact():
    state = load_state()
    view = MainView(state)
    if state.selected_contact_id is None:
        flash(get_message("form.noSelection"), "warning")
    view.edit_contact()
    save_state(state)
    return _back_to_main()


@bp.route("/cancel", methods=["POST"])
@login_required
def cancel_contact():
    state = load_state()
    MainView(state).cancel_form()
    save_state(state)
    return _back_to_main()


@bp.route("/save", methods=["POST"])
@login_required
def save_contact():
    state = load_state()
    view = MainView(state)
    form = request.form.to_dict()
    try:
        if state.form_mode == FORM_NEW:
            new_id = contacts_service.create_contact(form)
            view.row_id_change(new_id)
        else:
            contact_id = state.selected_contact_id
            if contact_id is None:
                flash(get_message("form.noSelection"), "warning")
                save_state(state)
                return _back_to_main()
            contacts_service.update_contact(contact_id, form, version=_optional_int(form.get("version")))
            view.select_contact(contact_id)
    except contacts_service.ContactValidationError as exc:
        LOG.debug("Contact form rejected: %s", exc)
        return render_main_layout(view, form_values=form, form_errors=form_error_messages(exc.errors))
    except contacts_service.ConcurrentModificationError:
        flash(get_message("form.stale"), "warning")
        view.select_contact(state.selected_contact_id)
    except contacts_service.ContactNotFoundError:
        flash(get_message("form.notFound"), "warning")
        view.select_contact(None)
        view.fix_visible_and_selected_item()
    else:
        flash(get_message("form.saved"), "info")
    save_state(state)
    return _back_to_main()


@bp.route("/<int:contact_id>/delete", methods=["POST"])
@login_required
def delete_contact(contact_id: int):
    state = load_state()
    view = MainView(state)
    try:
        contacts_service.delete_contact(contact_id)
    except contacts_service.ContactNotFoundError:
        flash(get_message("form.notFound"), "warning")
    else:
        flash(get_message("form.deleted"), "info")
    if state.selected_contact_id == contact_id:
        view.select_contact(None)
    view.fix_visible_and_selected_item()
    save_state(state)
    return _back_to_main()


def register_contacts(app: Any) -> None:
    if getattr(app, "_addressbook_contacts", False):
        return
    app.register_blueprint(bp)
    setattr(app, "_addressbook_contacts", True)
    LOG.debug("Contacts blueprint registered")


__all__ = ["bp", "register_contacts"]
