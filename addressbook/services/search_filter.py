"""Search filter value object shared by the search view and the tree."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping


@dataclass(frozen=True)
class SearchFilter:
    """One ``property_id`` / ``term`` condition of a (possibly saved) search.

    ``term_display_name`` is what the user typed; ``term`` is what the
    predicate compares against. They differ for city searches, where the
    typed name expands to one filter per matching city id.
    """

    property_id: str
    term: str
    search_name: str = ""
    property_display_name: str = ""
    term_display_name: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SearchFilter":
        return cls(
            property_id=str(raw.get("property_id") or ""),
            term=str(raw.get("term") or ""),
            search_name=str(raw.get("search_name") or ""),
            property_display_name=str(raw.get("property_display_name") or ""),
            term_display_name=str(raw.get("term_display_name") or ""),
        )


def dump_filters(filters: Iterable[SearchFilter]) -> List[Dict[str, str]]:
    return [item.to_dict() for item in filters]


def load_filters(raw: Any) -> List[SearchFilter]:
    if not isinstance(raw, list):
        return []
    return [SearchFilter.from_dict(item) for item in raw if isinstance(item, Mapping)]


__all__ = ["SearchFilter", "dump_filters", "load_filters"]
