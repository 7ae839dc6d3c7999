"""Contact list and contact form operations.

The person list is addressed by property ids (``FIRSTNAME``, ``POSTALCODE``,
...) that match the table headers. Filtering is expressed as an optional
SQLAlchemy predicate built by :mod:`addressbook.services.search_service`.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.sql.elements import ColumnElement

from addressbook import config as app_config
from addressbook.db.models import Person
from addressbook.db.repositories import cities_repo, contacts_repo
from addressbook.utils.logging import get_logger

LOG = get_logger("contacts_service")


@dataclass(frozen=True)
class ContactProperty:
    property_id: str
    attribute: str
    python_type: type

    @property
    def header_code(self) -> str:
        return f"list.column.{self.property_id}"


PROPERTIES: Tuple[ContactProperty, ...] = (
    ContactProperty("FIRSTNAME", "first_name", str),
    ContactProperty("LASTNAME", "last_name", str),
    ContactProperty("EMAIL", "email", str),
    ContactProperty("PHONENUMBER", "phone_number", str),
    ContactProperty("STREETADDRESS", "street_address", str),
    ContactProperty("POSTALCODE", "postal_code", int),
    ContactProperty("CITYID", "city_id", int),
)
_BY_ID = {prop.property_id: prop for prop in PROPERTIES}
VISIBLE_COLUMNS: Tuple[str, ...] = tuple(prop.property_id for prop in PROPERTIES)
CITY_PROPERTY = "CITYID"

_EMAIL_RE = re.compile(r"^([a-zA-Z0-9_.\-+])+@(([a-zA-Z0-9-])+\.)+([a-zA-Z0-9]{2,4})+$")
_POSTAL_CODE_RE = re.compile(r"^[1-9][0-9]{4}$")
_REQUIRED = ("first_name", "last_name")
_TEXT_FIELDS = ("first_name", "last_name", "email", "phone_number", "street_address")
_HEADER_FOR_FIELD = {prop.attribute: prop.header_code for prop in PROPERTIES}


class ContactError(RuntimeError):
    """Base error for contact operations."""


class UnknownPropertyError(ContactError):
    """Raised for a property id that is not a person column."""


class ContactNotFoundError(ContactError):
    """Raised when the addressed contact row does not exist."""


class ConcurrentModificationError(ContactError):
    """Raised when the row changed after the form loaded it."""


class ContactValidationError(ContactError):
    """Form input rejected; ``errors`` maps field name -> message code."""

    def __init__(self, errors: Dict[str, str], values: Optional[Dict[str, Any]] = None):
        super().__init__(", ".join(f"{name}={code}" for name, code in sorted(errors.items())))
        self.errors = errors
        self.values = values or {}


def get_property(property_id: str) -> ContactProperty:
    try:
        return _BY_ID[property_id]
    except KeyError:
        raise UnknownPropertyError(property_id) from None


def property_type(property_id: str) -> type:
    """Python type of the column behind ``property_id``."""
    return get_property(property_id).python_type


def column_for(property_id: str):
    return getattr(Person, get_property(property_id).attribute)


# ------------------- Person list --------------------

@dataclass
class ContactPage:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    page: int = 0
    page_count: int = 1
    total: int = 0
    selected_id: Optional[int] = None


def size(predicate: Optional[ColumnElement] = None) -> int:
    return contacts_repo.count_contacts(predicate)


def item_ids(predicate: Optional[ColumnElement] = None) -> List[int]:
    return contacts_repo.list_contact_ids(predicate)


def contains_id(contact_id: Optional[int], predicate: Optional[ColumnElement] = None) -> bool:
    if contact_id is None:
        return False
    return contacts_repo.position_of(contact_id, predicate) is not None


def page_containing(contact_id: Optional[int], predicate: Optional[ColumnElement] = None) -> int:
    if contact_id is None:
        return 0
    position = contacts_repo.position_of(contact_id, predicate)
    if position is None:
        return 0
    return position // app_config.page_size()


def fix_visible_and_selected_item(
    selected_id: Optional[int],
    predicate: Optional[ColumnElement] = None,
) -> Tuple[Optional[int], int]:
    """Keep the selection inside the filtered list.

    A missing or filtered-out selection moves to the first row. An empty
    list clears the selection. Returns ``(selected_id, page)`` where page is
    the one showing the selected row.
    """
    if contains_id(selected_id, predicate):
        return selected_id, page_containing(selected_id, predicate)
    first = contacts_repo.first_contact_id(predicate)
    return first, 0


def _row(person: Person, cities: Mapping[int, str]) -> Dict[str, Any]:
    row = person.as_dict()
    row["city_name"] = cities.get(person.city_id, "")
    return row


def list_page(
    predicate: Optional[ColumnElement] = None,
    *,
    page: int = 0,
    selected_id: Optional[int] = None,
) -> ContactPage:
    per_page = app_config.page_size()
    total = size(predicate)
    page_count = max(1, math.ceil(total / per_page))
    page = min(max(page, 0), page_count - 1)
    people = contacts_repo.list_contacts(predicate, offset=page * per_page, limit=per_page)
    cities = cities_repo.city_names()
    return ContactPage(
        rows=[_row(person, cities) for person in people],
        page=page,
        page_count=page_count,
        total=total,
        selected_id=selected_id,
    )


# ------------------- Person form --------------------

def get_contact(contact_id: int) -> Dict[str, Any]:
    person = contacts_repo.get_contact(contact_id)
    if person is None:
        raise ContactNotFoundError(str(contact_id))
    return _row(person, cities_repo.city_names())


def _clean_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    cleaned = str(raw).strip()
    return cleaned or None


def validate_contact(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate raw form input and return column values.

    A non-empty ``new_city`` wins over ``city_id`` and creates the city when
    it is not known yet; that only happens once every other field is valid.
    """
    values: Dict[str, Any] = {name: _clean_text(form.get(name)) for name in _TEXT_FIELDS}
    errors: Dict[str, str] = {}

    for name in _REQUIRED:
        if not values[name]:
            errors[name] = "form.error.required"

    if values["email"] and not _EMAIL_RE.match(values["email"]):
        errors["email"] = "form.error.email"

    raw_postal = _clean_text(form.get("postal_code"))
    values["postal_code"] = None
    if raw_postal:
        if _POSTAL_CODE_RE.match(raw_postal):
            values["postal_code"] = int(raw_postal)
        else:
            errors["postal_code"] = "form.error.postalCode"

    new_city = _clean_text(form.get("new_city"))
    raw_city = _clean_text(form.get("city_id"))
    values["city_id"] = None
    if not new_city:
        try:
            city_id = int(raw_city) if raw_city else None
        except ValueError:
            city_id = None
        if city_id is None or cities_repo.get_city(city_id) is None:
            errors["city_id"] = "form.error.city"
        else:
            values["city_id"] = city_id

    if errors:
        raise ContactValidationError(errors, values)

    if new_city:
        city = cities_repo.get_or_create_city(new_city)
        values["city_id"] = city.id
    return values


def required_field_header(field_name: str) -> str:
    """Message code of the column header for a form field."""
    return _HEADER_FOR_FIELD.get(field_name, field_name)


def create_contact(form: Mapping[str, Any]) -> int:
    values = validate_contact(form)
    person = contacts_repo.create_contact(values)
    LOG.info("Contact created id=%s", person.id)
    return int(person.id)


def update_contact(contact_id: int, form: Mapping[str, Any], *, version: Optional[int] = None) -> Dict[str, Any]:
    values = validate_contact(form)
    try:
        person = contacts_repo.update_contact(contact_id, values, expected_version=version)
    except contacts_repo.StaleContactError as exc:
        LOG.info("Contact update rejected id=%s reason=stale", contact_id)
        raise ConcurrentModificationError(str(contact_id)) from exc
    if person is None:
        raise ContactNotFoundError(str(contact_id))
    LOG.info("Contact updated id=%s", contact_id)
    return _row(person, cities_repo.city_names())


def delete_contact(contact_id: int) -> None:
    if not contacts_repo.delete_contact(contact_id):
        raise ContactNotFoundError(str(contact_id))
    LOG.info("Contact deleted id=%s", contact_id)


__all__ = [
    "ContactProperty",
    "PROPERTIES",
    "VISIBLE_COLUMNS",
    "CITY_PROPERTY",
    "ContactError",
    "UnknownPropertyError",
    "ContactNotFoundError",
    "ConcurrentModificationError",
    "ContactValidationError",
    "ContactPage",
    "get_property",
    "property_type",
    "column_for",
    "size",
    "item_ids",
    "contains_id",
    "page_containing",
    "fix_visible_and_selected_item",
    "list_page",
    "get_contact",
    "validate_contact",
    "required_field_header",
    "create_contact",
    "update_contact",
    "delete_contact",
]
