"""Repository helpers for person (contact) rows.

Every listing function accepts an optional SQLAlchemy predicate; ``None``
means "no filter". Rows are ordered by primary key so a freshly inserted
contact appears last.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.sql.elements import ColumnElement

from addressbook.db import app_session
from addressbook.db.models import Person


class StaleContactError(Exception):
    """Raised when the row changed since the caller read its version."""


_WRITABLE = (
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "street_address",
    "postal_code",
    "city_id",
)


def _apply(stmt, predicate: Optional[ColumnElement]):
    if predicate is not None:
        stmt = stmt.where(predicate)
    return stmt


def count_contacts(predicate: Optional[ColumnElement] = None) -> int:
    with app_session() as session:
        stmt = _apply(select(func.count(Person.id)), predicate)
        return int(session.execute(stmt).scalar_one())


def list_contact_ids(predicate: Optional[ColumnElement] = None) -> List[int]:
    with app_session() as session:
        stmt = _apply(select(Person.id), predicate).order_by(Person.id)
        return [row for row in session.execute(stmt).scalars()]


def list_contacts(
    predicate: Optional[ColumnElement] = None,
    *,
    offset: int = 0,
    limit: Optional[int] = None,
) -> List[Person]:
    with app_session() as session:
        stmt = _apply(select(Person), predicate).order_by(Person.id).offset(max(offset, 0))
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(session.execute(stmt).scalars())


def first_contact_id(predicate: Optional[ColumnElement] = None) -> Optional[int]:
    with app_session() as session:
        stmt = _apply(select(Person.id), predicate).order_by(Person.id).limit(1)
        return session.execute(stmt).scalar_one_or_none()


def position_of(contact_id: int, predicate: Optional[ColumnElement] = None) -> Optional[int]:
    """Zero-based position of ``contact_id`` in the filtered ordering."""
    with app_session() as session:
        present = session.execute(
            _apply(select(Person.id), predicate).where(Person.id == contact_id)
        ).scalar_one_or_none()
        if present is None:
            return None
        stmt = _apply(select(func.count(Person.id)), predicate).where(Person.id < contact_id)
        return int(session.execute(stmt).scalar_one())


def get_contact(contact_id: int) -> Optional[Person]:
    with app_session() as session:
        return session.get(Person, contact_id)


def create_contact(values: Dict[str, Any]) -> Person:
    payload = {key: values.get(key) for key in _WRITABLE}
    person = Person(**payload)
    with app_session() as session:
        session.add(person)
        session.flush()
    return person


def update_contact(
    contact_id: int,
    values: Dict[str, Any],
    *,
    expected_version: Optional[int] = None,
) -> Optional[Person]:
    try:
        with app_session() as session:
            person = session.get(Person, contact_id)
            if person is None:
                return None
            if expected_version is not None and person.version != expected_version:
                raise StaleContactError(f"contact {contact_id} was modified")
            for key in _WRITABLE:
                if key in values:
                    setattr(person, key, values[key])
            session.flush()
            return person
    except StaleDataError as exc:
        raise StaleContactError(f"contact {contact_id} was modified") from exc


def delete_contact(contact_id: int) -> bool:
    with app_session() as session:
        person = session.get(Person, contact_id)
        if person is None:
            return False
        session.delete(person)
        return True


__all__ = [
    "StaleContactError",
    "count_contacts",
    "list_contact_ids",
    "list_contacts",
    "first_contact_id",
    "position_of",
    "get_contact",
    "create_contact",
    "update_contact",
    "delete_contact",
]
