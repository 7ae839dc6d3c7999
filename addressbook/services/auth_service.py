"""Authentication manager checking username/password against the users table."""
from __future__ import annotations

from typing import Iterable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from addressbook.db.repositories import users_repo
from addressbook.security.context import Authentication
from addressbook.utils.identity import normalize_username
from addressbook.utils.logging import get_logger

LOG = get_logger("auth_service")

ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"


class AuthenticationError(RuntimeError):
    """Base error for failed authentication attempts."""


class BadCredentialsError(AuthenticationError):
    def __init__(self, message: str = "Bad credentials"):
        super().__init__(message)


class DisabledUserError(AuthenticationError):
    def __init__(self, message: str = "User is disabled"):
        super().__init__(message)


class AuthenticationManager:
    """Turns a username/password pair into an :class:`Authentication`."""

    def authenticate(self, username: str, password: str) -> Authentication:
        normalized = normalize_username(username)
        if not normalized or not password:
            raise BadCredentialsError()
        user = users_repo.get_user_by_username(normalized)
        if user is None or not check_password_hash(str(user.password_hash), password):
            LOG.info("authentication rejected username=%s", normalized)
            raise BadCredentialsError()
        if not user.enabled:
            LOG.info("authentication rejected username=%s reason=disabled", normalized)
            raise DisabledUserError()
        authentication = Authentication(
            principal=user.username,
            user_id=int(user.id),
            authorities=tuple(user.role_list()),
        )
        LOG.debug("authentication granted %s", authentication)
        return authentication


def create_account(
    username: str,
    password: str,
    *,
    roles: Iterable[str] = (ROLE_USER,),
    locale: Optional[str] = None,
):
    normalized = normalize_username(username)
    if not normalized:
        raise ValueError("username_required")
    if not password:
        raise ValueError("password_required")
    return users_repo.create_user(
        username=normalized,
        password_hash=generate_password_hash(password),
        roles=roles,
        locale=locale,
    )


def ensure_account(
    username: str,
    password: str,
    *,
    roles: Iterable[str] = (ROLE_USER,),
) -> bool:
    """Create the account unless the username is taken. Returns True if created."""
    normalized = normalize_username(username)
    if not normalized:
        return False
    if users_repo.get_user_by_username(normalized) is not None:
        return False
    try:
        create_account(normalized, password, roles=roles)
    except users_repo.UserExistsError:
        return False
    LOG.info("Account created username=%s roles=%s", normalized, ",".join(roles))
    return True


authentication_manager = AuthenticationManager()


__all__ = [
    "ROLE_USER",
    "ROLE_ADMIN",
    "AuthenticationError",
    "BadCredentialsError",
    "DisabledUserError",
    "AuthenticationManager",
    "authentication_manager",
    "create_account",
    "ensure_account",
]
