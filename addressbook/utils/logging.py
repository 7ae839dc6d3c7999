"""Application logging helpers.

Every module logger hangs below one application logger named after
``addressbook.config.APP_NAME``. Only that logger owns a stream handler and
a level (``addressbook.config.log_level_name()``); module loggers propagate
to it, so ``get_logger("search_service")`` logs as
``addressbook.search_service``.
"""
from __future__ import annotations

import logging
import threading

from addressbook import config as app_config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_LOCK = threading.Lock()


def _qualified(name: str) -> str:
    root = app_config.APP_NAME
    if not name or name == root or name.startswith(root + "."):
        return name or root
    return f"{root}.{name}"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(app_config.APP_NAME)
    if getattr(root, "_addressbook_configured", False):
        return root
    with _LOCK:
        if getattr(root, "_addressbook_configured", False):
            return root
        root.setLevel(getattr(logging, app_config.log_level_name(), logging.INFO))
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        setattr(root, "_addressbook_configured", True)
    return root


def get_logger(name: str = "") -> logging.Logger:
    """Return the application logger, or the named module logger below it."""
    _configure_root()
    return logging.getLogger(_qualified(name))


__all__ = ["LOG_FORMAT", "get_logger"]
