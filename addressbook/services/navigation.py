"""Navigation tree: "Show all", "Search" and saved searches below "Search"."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from addressbook.services.search_filter import SearchFilter, dump_filters, load_filters
from addressbook.services.ui_state import SEARCH, SHOW_ALL, MainViewState

SAVED_PREFIX = "saved:"
ROOT_CAPTIONS = {
    SHOW_ALL: "nav.showAll",
    SEARCH: "nav.search",
}


@dataclass
class TreeNode:
    item_id: str
    caption: str
    caption_is_code: bool = False
    selected: bool = False
    expanded: bool = False
    children_allowed: bool = True
    children: List["TreeNode"] = field(default_factory=list)


def saved_item_id(index: int) -> str:
    return f"{SAVED_PREFIX}{index}"


def saved_index(item_id: Optional[str]) -> Optional[int]:
    if not item_id or not item_id.startswith(SAVED_PREFIX):
        return None
    try:
        return int(item_id[len(SAVED_PREFIX):])
    except ValueError:
        return None


class NavigationTree:
    """Tree selection over :class:`MainViewState`.

    Items are selectable, but the selection can never be set to nothing.
    """

    def __init__(self, state: MainViewState):
        self.state = state

    def contains(self, item_id: Optional[str]) -> bool:
        if item_id in (SHOW_ALL, SEARCH):
            return True
        index = saved_index(item_id)
        return index is not None and 0 <= index < len(self.state.saved_searches)

    def select(self, item_id: Optional[str]) -> None:
        if not self.contains(item_id):
            return
        self.state.nav_item = item_id  # type: ignore[assignment]

    @property
    def value(self) -> str:
        return self.state.nav_item

    def expand_item(self, item_id: str) -> None:
        if item_id not in self.state.expanded:
            self.state.expanded.append(item_id)

    def collapse_item(self, item_id: str) -> None:
        if item_id in self.state.expanded:
            self.state.expanded.remove(item_id)

    def saved_search(self, item_id: Optional[str]) -> Optional[List[SearchFilter]]:
        index = saved_index(item_id)
        if index is None or not 0 <= index < len(self.state.saved_searches):
            return None
        return load_filters(self.state.saved_searches[index].get("filters"))

    def save_search(self, filters: Sequence[SearchFilter]) -> Optional[str]:
        """Add a leaf under "Search", expand "Search" and select the new leaf."""
        if not filters:
            return None
        self.state.saved_searches.append(
            {"name": filters[0].search_name, "filters": dump_filters(filters)}
        )
        item_id = saved_item_id(len(self.state.saved_searches) - 1)
        self.expand_item(SEARCH)
        self.select(item_id)
        return item_id

    def nodes(self) -> List[TreeNode]:
        selected = self.state.nav_item
        children = [
            TreeNode(
                item_id=saved_item_id(index),
                caption=str(entry.get("name") or ""),
                selected=saved_item_id(index) == selected,
                children_allowed=False,
            )
            for index, entry in enumerate(self.state.saved_searches)
        ]
        return [
            TreeNode(
                item_id=SHOW_ALL,
                caption=ROOT_CAPTIONS[SHOW_ALL],
                caption_is_code=True,
                selected=selected == SHOW_ALL,
                children_allowed=False,
            ),
            TreeNode(
                item_id=SEARCH,
                caption=ROOT_CAPTIONS[SEARCH],
                caption_is_code=True,
                selected=selected == SEARCH,
                expanded=SEARCH in self.state.expanded,
                children=children,
            ),
        ]


__all__ = [
    "SAVED_PREFIX",
    "TreeNode",
    "NavigationTree",
    "saved_item_id",
    "saved_index",
]
