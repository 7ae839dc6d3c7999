"""Application factory and wiring.

Orchestrates: DB init, optional demo seeding, i18n, CSRF protection, the
security context request listeners and route registration.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask
from flask_wtf import CSRFProtect

from addressbook import config as app_config
from addressbook.db import init_engine_once
from addressbook.db.engine import remove_scoped_session
from addressbook.i18n import configure_i18n
from addressbook.routes.inject import register_all as register_routes
from addressbook.security import register_security_context
from addressbook.services import demo_data
from addressbook.utils.logging import get_logger

LOG = get_logger("startup")

PACKAGE_DIR = Path(__file__).resolve().parents[1]

csrf = CSRFProtect()


def create_app(config_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(
        "addressbook",
        template_folder=str(PACKAGE_DIR / "templates"),
        static_folder=str(PACKAGE_DIR / "static"),
    )
    app.config.update(
        SECRET_KEY=app_config.secret_key(),
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
    )
    if config_overrides:
        app.config.update(dict(config_overrides))
    init_app(app)
    return app


def init_app(app: Any) -> None:
    if getattr(app, "_addressbook_wired", False):
        return
    LOG.debug("init_app starting")
    init_engine_once()
    LOG.debug("DB engine initialized")
    if app.config.get("ADDRESSBOOK_SEED_DEMO_DATA", app_config.seed_demo_data_enabled()):
        demo_data.seed_all()
    configure_i18n(app)
    csrf.init_app(app)
    register_security_context(app)
    app.teardown_appcontext(remove_scoped_session)
    register_routes(app)
    setattr(app, "_addressbook_wired", True)
    LOG.info("App startup wiring complete %s", app_config.summarize_runtime_config())


__all__ = ["create_app", "init_app", "csrf"]
