"""Route registration, called once from startup wiring."""
from __future__ import annotations

from typing import Any

from .contacts import register_contacts
from .health import register_health
from .language_switch import register_language_switch
from .login import register_login
from .main_view import register_main_view
from .search import register_search


def register_all(app: Any) -> None:
    register_login(app)
    register_language_switch(app)
    register_main_view(app)
    register_contacts(app)
    register_search(app)
    register_health(app)


__all__ = ["register_all"]
