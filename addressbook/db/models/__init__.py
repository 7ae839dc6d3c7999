"""ORM models aggregate exports."""
from .addressbook import (  # noqa: F401
	Base,
	City,
	Person,
	User,
)

__all__ = [
	"Base",
	"City",
	"Person",
	"User",
]
