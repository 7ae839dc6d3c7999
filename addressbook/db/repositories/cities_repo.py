"""Repository helpers for the city lookup table."""
from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import func, select

from addressbook.db import app_session
from addressbook.db.models import City


def list_cities() -> List[City]:
    with app_session() as session:
        return list(session.execute(select(City).order_by(City.name, City.id)).scalars())


def city_names() -> Dict[int, str]:
    with app_session() as session:
        rows = session.execute(select(City.id, City.name)).all()
        return {row.id: row.name for row in rows}


def get_city(city_id: int) -> Optional[City]:
    with app_session() as session:
        return session.get(City, city_id)


def find_city_ids_by_name(term: str) -> List[int]:
    """Ids of cities whose name contains ``term``."""
    with app_session() as session:
        stmt = select(City.id).where(City.name.like(f"%{term}%")).order_by(City.id)
        return list(session.execute(stmt).scalars())


def get_or_create_city(name: str) -> City:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("city_name_required")
    with app_session() as session:
        existing = (
            session.execute(select(City).where(func.lower(City.name) == cleaned.lower()))
            .scalars()
            .first()
        )
        if existing is not None:
            return existing
        city = City(name=cleaned)
        session.add(city)
        session.flush()
        return city


def count_cities() -> int:
    with app_session() as session:
        return int(session.execute(select(func.count(City.id))).scalar_one())


__all__ = [
    "list_cities",
    "city_names",
    "get_city",
    "find_city_ids_by_name",
    "get_or_create_city",
    "count_cities",
]
