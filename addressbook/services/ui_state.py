"""Per-session UI state of the main layout.

Which view is shown, the tree and table selections, the form mode and the
active and saved searches are kept in the Flask session under one key.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from flask import session

SESSION_UI_KEY = "main_view"

VIEW_LIST = "list"
VIEW_SEARCH = "search"

FORM_READ = "read"
FORM_EDIT = "edit"
FORM_NEW = "new"

OVERLAY_HELP = "help"
OVERLAY_SHARE = "share"

SHOW_ALL = "show_all"
SEARCH = "search"


@dataclass
class MainViewState:
    view: str = VIEW_LIST
    nav_item: str = SHOW_ALL
    selected_contact_id: Optional[int] = None
    form_mode: str = FORM_READ
    page: int = 0
    active_filters: List[Dict[str, str]] = field(default_factory=list)
    saved_searches: List[Dict[str, Any]] = field(default_factory=list)
    expanded: List[str] = field(default_factory=list)
    overlay: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Any) -> "MainViewState":
        if not isinstance(raw, dict):
            return cls()
        state = cls()
        if raw.get("view") in (VIEW_LIST, VIEW_SEARCH):
            state.view = raw["view"]
        if isinstance(raw.get("nav_item"), str):
            state.nav_item = raw["nav_item"]
        selected = raw.get("selected_contact_id")
        state.selected_contact_id = selected if isinstance(selected, int) else None
        if raw.get("form_mode") in (FORM_READ, FORM_EDIT, FORM_NEW):
            state.form_mode = raw["form_mode"]
        page = raw.get("page")
        state.page = page if isinstance(page, int) and page >= 0 else 0
        for name in ("active_filters", "saved_searches", "expanded"):
            value = raw.get(name)
            if isinstance(value, list):
                setattr(state, name, list(value))
        if raw.get("overlay") in (OVERLAY_HELP, OVERLAY_SHARE):
            state.overlay = raw["overlay"]
        return state


def load_state() -> MainViewState:
    return MainViewState.from_dict(session.get(SESSION_UI_KEY))


def save_state(state: MainViewState) -> None:
    session[SESSION_UI_KEY] = state.to_dict()
    session.modified = True


def reset_state() -> None:
    session.pop(SESSION_UI_KEY, None)


__all__ = [
    "SESSION_UI_KEY",
    "VIEW_LIST",
    "VIEW_SEARCH",
    "FORM_READ",
    "FORM_EDIT",
    "FORM_NEW",
    "OVERLAY_HELP",
    "OVERLAY_SHARE",
    "SHOW_ALL",
    "SEARCH",
    "MainViewState",
    "load_state",
    "save_state",
    "reset_state",
]
