"""Security context plumbing (session principal <-> context-local holder)."""
from .context import (
    Authentication,
    current_authentication,
    get_authentication,
    get_user,
    login_required,
    register_security_context,
    store_user,
)

__all__ = [
    "Authentication",
    "current_authentication",
    "get_authentication",
    "get_user",
    "login_required",
    "register_security_context",
    "store_user",
]
