"""Session identity helpers shared by routes and the security context."""
from __future__ import annotations

from typing import Any, Optional

from flask import session

SESSION_USER_ID_KEY = "user_id"
SESSION_USERNAME_KEY = "username"
SESSION_ROLES_KEY = "roles"


def normalize_username(raw: Any) -> Optional[str]:
    if not isinstance(raw, str):
        return None
    cleaned = raw.strip().lower()
    return cleaned or None


def get_current_user_id() -> Optional[int]:
    uid = session.get(SESSION_USER_ID_KEY)
    if uid is None:
        return None
    try:
        return int(uid)
    except (TypeError, ValueError):
        return None


def get_current_username() -> Optional[str]:
    return normalize_username(session.get(SESSION_USERNAME_KEY))


def get_current_roles() -> list[str]:
    raw = session.get(SESSION_ROLES_KEY) or []
    if not isinstance(raw, list):
        return []
    return [str(role) for role in raw]


def set_identity_session(*, user_id: int, username: str, roles: list[str]) -> None:
    session[SESSION_USER_ID_KEY] = int(user_id)
    session[SESSION_USERNAME_KEY] = username
    session[SESSION_ROLES_KEY] = list(roles)


def clear_identity_session() -> None:
    for key in (SESSION_USER_ID_KEY, SESSION_USERNAME_KEY, SESSION_ROLES_KEY):
        session.pop(key, None)


__all__ = [
    "SESSION_USER_ID_KEY",
    "SESSION_USERNAME_KEY",
    "SESSION_ROLES_KEY",
    "normalize_username",
    "get_current_user_id",
    "get_current_username",
    "get_current_roles",
    "set_identity_session",
    "clear_identity_session",
]
