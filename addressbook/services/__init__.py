"""Service exports."""

from . import (
    auth_service,
    contacts_service,
    demo_data,
    main_view,
    navigation,
    search_service,
    ui_state,
)
from .contacts_service import (
    ConcurrentModificationError,
    ContactNotFoundError,
    ContactValidationError,
)
from .search_filter import SearchFilter
from .search_service import InvalidSearchTermError, SearchError

__all__ = [
    "auth_service",
    "contacts_service",
    "demo_data",
    "main_view",
    "navigation",
    "search_service",
    "ui_state",
    "ConcurrentModificationError",
    "ContactNotFoundError",
    "ContactValidationError",
    "SearchFilter",
    "InvalidSearchTermError",
    "SearchError",
]
