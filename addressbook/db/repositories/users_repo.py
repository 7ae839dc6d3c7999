"""Repository helpers for login accounts."""
from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from addressbook.db import app_session
from addressbook.db.models import User


class UserExistsError(Exception):
    """Raised when attempting to insert a duplicate username."""


def get_user_by_username(username: str) -> Optional[User]:
    with app_session() as session:
        return (
            session.query(User)
            .filter(func.lower(User.username) == (username or "").strip().lower())
            .one_or_none()
        )


def get_user(user_id: int) -> Optional[User]:
    with app_session() as session:
        return session.get(User, user_id)


def create_user(
    *,
    username: str,
    password_hash: str,
    roles: Iterable[str] = ("ROLE_USER",),
    enabled: bool = True,
    locale: Optional[str] = None,
) -> User:
    user = User(
        username=username,
        password_hash=password_hash,
        roles=",".join(roles),
        enabled=enabled,
        locale=locale,
    )
    try:
        with app_session() as session:
            session.add(user)
    except IntegrityError as exc:
        raise UserExistsError(f"user {username} already exists") from exc
    return user


def update_locale(user_id: int, locale: Optional[str]) -> bool:
    with app_session() as session:
        user = session.get(User, user_id)
        if user is None:
            return False
        user.locale = locale
        return True


__all__ = [
    "UserExistsError",
    "get_user_by_username",
    "get_user",
    "create_user",
    "update_locale",
]
