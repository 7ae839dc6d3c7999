"""Per-request security context.

The authenticated principal lives in the Flask session between requests.
Consecutive requests of one session may be served by different worker
threads, so the principal is copied into a context-local holder when a
request starts and cleared when it ends. Code below the routes reads it
through :func:`current_authentication` without touching the session.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Optional, Tuple

from flask import flash, redirect, request, url_for
from werkzeug.local import Local, LocalProxy, release_local

from addressbook.i18n import get_message
from addressbook.utils.identity import (
    clear_identity_session,
    get_current_roles,
    get_current_user_id,
    get_current_username,
    set_identity_session,
)
from addressbook.utils.logging import get_logger

LOG = get_logger("security.context")

_holder = Local()


@dataclass(frozen=True)
class Authentication:
    """Authenticated principal with its granted authorities."""

    principal: str
    user_id: int
    authorities: Tuple[str, ...] = field(default_factory=tuple)
    authenticated: bool = True

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities

    def __str__(self) -> str:
        return f"{self.principal} {list(self.authorities)}"


def get_authentication() -> Optional[Authentication]:
    return getattr(_holder, "authentication", None)


def set_authentication(authentication: Optional[Authentication]) -> None:
    _holder.authentication = authentication


def clear_context() -> None:
    release_local(_holder)


current_authentication = LocalProxy(get_authentication)


def authentication_from_session() -> Optional[Authentication]:
    user_id = get_current_user_id()
    username = get_current_username()
    if user_id is None or not username:
        return None
    return Authentication(
        principal=username,
        user_id=user_id,
        authorities=tuple(get_current_roles()),
    )


def store_user(authentication: Optional[Authentication]) -> None:
    """Set (or clear, with ``None``) the session user and the holder."""
    if authentication is None:
        clear_identity_session()
        clear_context()
        return
    set_identity_session(
        user_id=authentication.user_id,
        username=authentication.principal,
        roles=list(authentication.authorities),
    )
    set_authentication(authentication)


def get_user() -> Optional[Authentication]:
    """Currently logged in user, ``None`` before login."""
    return get_authentication()


def transaction_start() -> None:
    authentication = authentication_from_session()
    LOG.debug("Request started, setting authentication data of security context to [%s]", authentication)
    set_authentication(authentication)


def transaction_end(_exc: Optional[BaseException] = None) -> None:
    LOG.debug("Request ended, removing authentication data from security context")
    clear_context()


def login_required(view: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(view)
    def wrapped(*args, **kwargs):
        if get_authentication() is None:
            flash(get_message("session.expired"), "warning")
            return redirect(url_for("login_view.login_page", next=request.path))
        return view(*args, **kwargs)

    return wrapped


def register_security_context(app: Any) -> None:
    if getattr(app, "_addressbook_security_context", False):
        return
    app.before_request(transaction_start)
    app.teardown_request(transaction_end)
    setattr(app, "_addressbook_security_context", True)
    LOG.debug("Security context request listeners registered")


__all__ = [
    "Authentication",
    "get_authentication",
    "set_authentication",
    "clear_context",
    "current_authentication",
    "authentication_from_session",
    "store_user",
    "get_user",
    "transaction_start",
    "transaction_end",
    "login_required",
    "register_security_context",
]
