"""Application configuration accessors.

Centralizes environment variable parsing & defaults so the rest of the code
never reads ``os.environ`` directly. Accessors are evaluated on each call so
tests can flip values with ``monkeypatch.setenv``.
"""
from __future__ import annotations

import os
import secrets
from functools import lru_cache

APP_NAME = "addressbook"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Address Book demo application"

DEFAULT_DB_PATH = "addressbook.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_PAGE_SIZE = 25
DEFAULT_DEMO_PERSON_COUNT = 100
DEFAULT_LOCALE = "en_US"
_TRUE = {"1", "true", "yes", "on"}


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def env_bool(name: str, default: bool = False) -> bool:
    raw = _raw_env(name, str(default).lower())
    if raw is None:
        return default
    return raw.lower() in _TRUE


def env_int(name: str, default: int, *, minimum: int = 1) -> int:
    raw = _raw_env(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return max(value, minimum)


def get_db_path() -> str:
    return _raw_env("ADDRESSBOOK_DB_PATH", DEFAULT_DB_PATH)  # type: ignore[return-value]


def log_level_name() -> str:
    return _raw_env("ADDRESSBOOK_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()  # type: ignore[union-attr]


@lru_cache(maxsize=1)
def _process_secret() -> str:
    return secrets.token_hex(32)


def secret_key() -> str:
    """Flask session signing key.

    Environment Variable: ADDRESSBOOK_SECRET_KEY
    Without it a random key is generated per process, which logs every user
    out on restart.
    """
    value = (os.getenv("ADDRESSBOOK_SECRET_KEY") or "").strip()
    return value or _process_secret()


def page_size() -> int:
    """Rows per person list page (ADDRESSBOOK_PAGE_SIZE)."""
    return env_int("ADDRESSBOOK_PAGE_SIZE", DEFAULT_PAGE_SIZE)


def seed_demo_data_enabled() -> bool:
    return env_bool("ADDRESSBOOK_SEED_DEMO_DATA", default=True)


def demo_person_count() -> int:
    return env_int("ADDRESSBOOK_DEMO_PERSON_COUNT", DEFAULT_DEMO_PERSON_COUNT, minimum=0)


def default_locale() -> str:
    value = (os.getenv("ADDRESSBOOK_DEFAULT_LOCALE") or "").strip()
    return value or DEFAULT_LOCALE


def admin_username() -> str:
    return (os.getenv("ADDRESSBOOK_ADMIN_USERNAME") or "admin").strip()


def admin_password() -> str:
    return os.getenv("ADDRESSBOOK_ADMIN_PASSWORD", "admin")


def user_username() -> str:
    return (os.getenv("ADDRESSBOOK_USER_USERNAME") or "user").strip()


def user_password() -> str:
    return os.getenv("ADDRESSBOOK_USER_PASSWORD", "user")


def application_version() -> str:
    return APP_VERSION


@lru_cache(maxsize=1)
def metadata() -> dict:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
    }


def summarize_runtime_config() -> dict:
    return {
        "db_path": get_db_path(),
        "log_level": log_level_name(),
        "page_size": page_size(),
        "seed_demo_data": seed_demo_data_enabled(),
        "default_locale": default_locale(),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "env_bool",
    "env_int",
    "get_db_path",
    "log_level_name",
    "secret_key",
    "page_size",
    "seed_demo_data_enabled",
    "demo_person_count",
    "default_locale",
    "admin_username",
    "admin_password",
    "user_username",
    "user_password",
    "application_version",
    "metadata",
    "summarize_runtime_config",
]
