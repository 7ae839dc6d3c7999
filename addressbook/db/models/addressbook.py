"""ORM models for the address book DB (persons, cities, user accounts)."""
from __future__ import annotations

import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class City(Base):
    """City lookup table referenced by ``Person.city_id``."""

    __tablename__ = "city"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False, index=True)
    version = Column(Integer, nullable=False, default=0)

    __mapper_args__ = {"version_id_col": version}

    def as_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "version": self.version}

    def __repr__(self) -> str:  # pragma: no cover
        return f"<City id={self.id} name={self.name}>"


class Person(Base):
    """One address book entry.

    ``version`` is the optimistic locking column: SQLAlchemy adds it to the
    UPDATE criteria and raises ``StaleDataError`` when another session
    changed the row first.
    """

    __tablename__ = "personaddress"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(64), nullable=False)
    last_name = Column(String(64), nullable=False, index=True)
    email = Column(String(64), nullable=True)
    phone_number = Column(String(64), nullable=True)
    street_address = Column(String(128), nullable=True)
    postal_code = Column(Integer, nullable=True)
    city_id = Column(Integer, ForeignKey("city.id"), nullable=False, index=True)
    version = Column(Integer, nullable=False, default=0)

    __mapper_args__ = {"version_id_col": version}

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone_number": self.phone_number,
            "street_address": self.street_address,
            "postal_code": self.postal_code,
            "city_id": self.city_id,
            "version": self.version,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return "<Person id={0} name={1} {2} city_id={3}>".format(
            self.id,
            self.first_name,
            self.last_name,
            self.city_id,
        )


class User(Base):
    """Login account checked by the authentication manager.

    ``roles`` holds a comma separated authority list (``ROLE_USER,ROLE_ADMIN``).
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    roles = Column(String(255), nullable=False, default="ROLE_USER")
    enabled = Column(Boolean, nullable=False, default=True)
    locale = Column(String(16), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)

    def role_list(self) -> list[str]:
        return [role.strip() for role in (self.roles or "").split(",") if role.strip()]

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "roles": self.role_list(),
            "enabled": bool(self.enabled),
            "locale": self.locale,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} username={self.username}>"


__all__ = ["Base", "City", "Person", "User"]
