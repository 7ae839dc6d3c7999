"""Search filter construction over the person list.

A search is a list of :class:`SearchFilter` combined with OR. Integer
columns compare with equality and require a well-formed integer term;
text columns match ``LIKE %term%``. The predicate is built completely
before it is applied, so a malformed term never reaches the database.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from addressbook.db.repositories import cities_repo
from addressbook.services import contacts_service
from addressbook.services.search_filter import SearchFilter
from addressbook.utils.logging import get_logger

LOG = get_logger("search_service")

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


class SearchError(RuntimeError):
    """Search input rejected; ``str(exc)`` is the message code to show."""

    @property
    def code(self) -> str:
        return str(self)


class InvalidSearchTermError(SearchError):
    """A term for an integer column is not a 32-bit integer."""

    def __init__(self, message: str = "search.error.invalidTerm"):
        super().__init__(message)


def build_search_filters(
    property_id: Optional[str],
    term: Optional[str],
    *,
    search_name: str = "",
    property_display_name: str = "",
) -> List[SearchFilter]:
    """Turn the search form into filters.

    A city search matches the typed text against city names and yields one
    filter per matching city id, possibly none.
    """
    cleaned_term = (term or "").strip()
    if not property_id or not cleaned_term:
        raise SearchError("search.error.empty")
    try:
        contacts_service.get_property(property_id)
    except contacts_service.UnknownPropertyError as exc:
        raise SearchError("search.error.empty") from exc
    name = (search_name or "").strip()
    display = property_display_name or property_id

    if property_id != contacts_service.CITY_PROPERTY:
        return [SearchFilter(property_id, cleaned_term, name, display, cleaned_term)]

    city_ids = cities_repo.find_city_ids_by_name(cleaned_term)
    LOG.debug("city search term=%s matched %s cities", cleaned_term, len(city_ids))
    return [
        SearchFilter(contacts_service.CITY_PROPERTY, str(city_id), name, display, cleaned_term)
        for city_id in city_ids
    ]


def require_search_name(save_search: bool, search_name: Optional[str]) -> None:
    if save_search and not (search_name or "").strip():
        raise SearchError("search.error.nameRequired")


def filter_clause(search_filter: SearchFilter) -> ColumnElement:
    column = contacts_service.column_for(search_filter.property_id)
    if contacts_service.property_type(search_filter.property_id) is int:
        term = search_filter.term.strip()
        if not _INTEGER_RE.match(term):
            raise InvalidSearchTermError()
        value = int(term)
        # integer columns hold 32-bit values; anything wider cannot match
        if not _INT_MIN <= value <= _INT_MAX:
            raise InvalidSearchTermError()
        return column == value
    return column.like(f"%{search_filter.term}%")


def build_predicate(filters: Sequence[SearchFilter]) -> Optional[ColumnElement]:
    """OR of the filter clauses, ``None`` for no filters."""
    if not filters:
        return None
    return or_(*[filter_clause(item) for item in filters])


def describe(filters: Iterable[SearchFilter]) -> str:
    return " OR ".join(f"{item.property_id}~{item.term}" for item in filters)


__all__ = [
    "SearchError",
    "InvalidSearchTermError",
    "build_search_filters",
    "require_search_name",
    "filter_clause",
    "build_predicate",
    "describe",
]
