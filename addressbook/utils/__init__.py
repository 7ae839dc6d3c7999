"""Utility helpers."""
from .identity import (
    normalize_username,
    get_current_user_id,
    get_current_username,
    get_current_roles,
    set_identity_session,
    clear_identity_session,
)

__all__ = [
    "normalize_username",
    "get_current_user_id",
    "get_current_username",
    "get_current_roles",
    "set_identity_session",
    "clear_identity_session",
]
