"""Main layout behaviour: toolbar buttons, tree clicks, search and selection.

:class:`MainView` works on a :class:`MainViewState` loaded from the session
and saved back by the route after each interaction. Views are plain state
switches; rendering happens in the templates.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from sqlalchemy.sql.elements import ColumnElement

from addressbook.services import contacts_service, search_service
from addressbook.services.navigation import NavigationTree, saved_index
from addressbook.services.search_filter import SearchFilter, dump_filters, load_filters
from addressbook.services.ui_state import (
    FORM_EDIT,
    FORM_NEW,
    FORM_READ,
    OVERLAY_HELP,
    OVERLAY_SHARE,
    SEARCH,
    SHOW_ALL,
    VIEW_LIST,
    VIEW_SEARCH,
    MainViewState,
)
from addressbook.utils.logging import get_logger

LOG = get_logger("main_view")

BUTTON_ADD_CONTACT = "add_contact"
BUTTON_SEARCH = "search"
BUTTON_SHARE = "share"
BUTTON_HELP = "help"
BUTTONS = (BUTTON_ADD_CONTACT, BUTTON_SEARCH, BUTTON_SHARE, BUTTON_HELP)


@dataclass(frozen=True)
class SearchSummary:
    property_display_name: str
    term_display_name: str
    size: int


class MainView:
    def __init__(self, state: MainViewState):
        self.state = state
        self.tree = NavigationTree(state)

    # ------------------- container filters --------------------

    @property
    def active_filters(self) -> List[SearchFilter]:
        return load_filters(self.state.active_filters)

    def container_predicate(self) -> Optional[ColumnElement]:
        try:
            return search_service.build_predicate(self.active_filters)
        except search_service.SearchError:
            # Filters are validated before they are stored; anything else is stale session data.
            LOG.warning("Dropping unusable stored filters: %s", self.state.active_filters)
            self.state.active_filters = []
            return None

    def remove_all_container_filters(self) -> None:
        self.state.active_filters = []

    # ------------------- views --------------------

    def show_list_view(self) -> None:
        self.state.view = VIEW_LIST
        self.fix_visible_and_selected_item()

    def show_search_view(self) -> None:
        self.state.view = VIEW_SEARCH
        self.fix_visible_and_selected_item()

    def fix_visible_and_selected_item(self) -> None:
        selected, page = contacts_service.fix_visible_and_selected_item(
            self.state.selected_contact_id,
            self.container_predicate(),
        )
        if selected != self.state.selected_contact_id:
            self.select_contact(selected)
        self.state.page = page

    def close_overlay(self) -> None:
        self.state.overlay = None

    # ------------------- list / form --------------------

    def select_contact(self, contact_id: Optional[int]) -> None:
        """Table selection changed: the form shows the row read-only."""
        self.state.selected_contact_id = contact_id
        self.state.form_mode = FORM_READ

    def edit_contact(self) -> None:
        if self.state.selected_contact_id is not None:
            self.state.form_mode = FORM_EDIT

    def cancel_form(self) -> None:
        if self.state.form_mode == FORM_NEW:
            self.state.form_mode = FORM_READ
            self.state.selected_contact_id = None
            self.fix_visible_and_selected_item()
            return
        self.state.form_mode = FORM_READ

    def row_id_change(self, new_row_id: int) -> None:
        """A new row got its id: select it and bring it into view."""
        self.select_contact(new_row_id)
        self.fix_visible_and_selected_item()

    def add_new_contact(self) -> None:
        self.show_list_view()
        self.tree.select(SHOW_ALL)
        self.remove_all_container_filters()
        self.state.form_mode = FORM_NEW

    # ------------------- toolbar & tree --------------------

    def button_click(self, button: str) -> None:
        if button == BUTTON_SEARCH:
            self.show_search_view()
            self.tree.select(SEARCH)
        elif button == BUTTON_HELP:
            self.state.overlay = OVERLAY_HELP
        elif button == BUTTON_SHARE:
            self.state.overlay = OVERLAY_SHARE
        elif button == BUTTON_ADD_CONTACT:
            self.add_new_contact()

    def item_click(self, item_id: Optional[str]) -> Optional[SearchSummary]:
        if item_id is None or not self.tree.contains(item_id):
            return None
        self.tree.select(item_id)
        if item_id == SHOW_ALL:
            self.remove_all_container_filters()
            self.show_list_view()
        elif item_id == SEARCH:
            self.show_search_view()
        elif saved_index(item_id) is not None:
            filters = self.tree.saved_search(item_id) or []
            return self.search(filters)
        return None

    # ------------------- search --------------------

    def search(self, filters: Sequence[SearchFilter]) -> Optional[SearchSummary]:
        """Apply ``filters`` as the container filter and show the list.

        No filters means no change. Raises
        :class:`~addressbook.services.search_service.InvalidSearchTermError`
        for a malformed integer term; the active filters stay untouched.
        """
        if not filters:
            return None
        predicate = search_service.build_predicate(filters)
        self.state.active_filters = dump_filters(filters)
        self.show_list_view()
        found = contacts_service.size(predicate)
        LOG.info("Search %s found %s item(s)", search_service.describe(filters), found)
        return SearchSummary(
            property_display_name=filters[0].property_display_name,
            term_display_name=filters[0].term_display_name,
            size=found,
        )

    def save_search(self, filters: Sequence[SearchFilter]) -> Optional[str]:
        return self.tree.save_search(filters)


__all__ = [
    "BUTTON_ADD_CONTACT",
    "BUTTON_SEARCH",
    "BUTTON_SHARE",
    "BUTTON_HELP",
    "BUTTONS",
    "SearchSummary",
    "MainView",
]
