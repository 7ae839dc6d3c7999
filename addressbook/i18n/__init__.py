"""Message bundle lookup and locale selection.

UI text is looked up by message code (``login.title``, ``app.title`` ...)
in gettext catalogs under ``addressbook/translations/<locale>/LC_MESSAGES``.
Catalogs are kept as ``.po`` sources and compiled in memory into Babel
``Translations`` on first use. Locale resolution is delegated to
Flask-Babel through a locale selector honoring the session choice.
"""
from __future__ import annotations

from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Any, Optional, Sequence

from babel.messages.mofile import write_mo
from babel.messages.pofile import read_po
from babel.support import NullTranslations, Translations
from flask import current_app, has_request_context, session
from flask_babel import Babel, get_locale

from addressbook import config as app_config
from addressbook.db.repositories import users_repo
from addressbook.i18n.preferences import (
    SESSION_LOCALE_KEY,
    SUPPORTED_LOCALES,
    locale_display_name,
    normalize_locale_choice,
    supported_locale_choices,
)
from addressbook.utils.identity import get_current_user_id
from addressbook.utils.logging import get_logger

LOG = get_logger("i18n")

TRANSLATIONS_ROOT = Path(__file__).resolve().parents[1] / "translations"
DOMAIN = "messages"
CATALOG_NAME = f"{DOMAIN}.po"
_EXTENSION_KEY = "addressbook_messages"


class NoSuchMessageError(LookupError):
    """Raised when a message code resolves in neither the locale nor the default."""

    def __init__(self, code: str, locale: Optional[str]):
        super().__init__(f"No message found under code '{code}' for locale '{locale}'.")
        self.code = code
        self.locale = locale


def load_catalog(root: Path, locale: str) -> NullTranslations:
    """Compile ``<root>/<locale>/LC_MESSAGES/messages.po`` into translations.

    Fuzzy and untranslated entries are left out. A missing catalog yields
    empty translations.
    """
    path = Path(root) / locale / "LC_MESSAGES" / CATALOG_NAME
    if not path.is_file():
        LOG.debug("Message catalog missing for locale %s: %s", locale, path)
        return NullTranslations()
    with path.open("rb") as fileobj:
        catalog = read_po(fileobj, locale=locale, domain=DOMAIN)
    compiled = BytesIO()
    write_mo(compiled, catalog, use_fuzzy=False)
    compiled.seek(0)
    LOG.debug("Loaded %s messages for locale %s", len(catalog), locale)
    return Translations(compiled, domain=DOMAIN)


@lru_cache(maxsize=None)
def _translations(root: str, locale: str, default_locale: str) -> NullTranslations:
    translations = load_catalog(Path(root), locale)
    if locale != default_locale:
        translations.add_fallback(load_catalog(Path(root), default_locale))
    return translations


class MessageSource:
    """Code -> text lookup; the default locale backs every other locale."""

    def __init__(self, root: Path = TRANSLATIONS_ROOT, default_locale: Optional[str] = None):
        self.root = Path(root)
        self.default_locale = default_locale or app_config.default_locale()

    def translations(self, locale: Optional[str] = None) -> NullTranslations:
        return _translations(str(self.root), locale or self.default_locale, self.default_locale)

    def reload(self) -> None:
        _translations.cache_clear()

    def get_message(self, code: str, args: Sequence[Any] = (), locale: Optional[str] = None) -> str:
        """Return the formatted text for ``code``.

        ``{0}``-style placeholders are replaced by ``args``. Raises
        :class:`NoSuchMessageError` when neither ``locale`` nor the default
        locale defines the code.
        """
        template = self.translations(locale).gettext(code)
        # gettext hands the msgid back when no catalog in the chain has it
        if template == code:
            raise NoSuchMessageError(code, locale or self.default_locale)
        return template.format(*args) if args else template


def current_locale() -> str:
    if has_request_context():
        resolved = get_locale()
        if resolved is not None:
            return str(resolved)
    return app_config.default_locale()


def message_source() -> MessageSource:
    source = current_app.extensions.get(_EXTENSION_KEY)
    if source is None:
        source = MessageSource()
        current_app.extensions[_EXTENSION_KEY] = source
    return source


def get_message(code: str, *args: Any) -> str:
    """Look up ``code`` in the active request locale."""
    return message_source().get_message(code, args, current_locale())


def select_locale() -> str:
    """Flask-Babel locale selector: session choice, user preference, default."""
    chosen = normalize_locale_choice(session.get(SESSION_LOCALE_KEY))
    if chosen:
        return chosen
    user_id = get_current_user_id()
    if user_id is not None:
        user = users_repo.get_user(user_id)
        preferred = normalize_locale_choice(getattr(user, "locale", None))
        if preferred:
            return preferred
    return normalize_locale_choice(app_config.default_locale()) or SUPPORTED_LOCALES[0]


def configure_i18n(app) -> None:
    if getattr(app, "_addressbook_i18n", False):
        return
    app.config.setdefault("BABEL_DEFAULT_LOCALE", app_config.default_locale())
    Babel(app, locale_selector=select_locale)
    app.extensions[_EXTENSION_KEY] = MessageSource(default_locale=app_config.default_locale())
    app.jinja_env.globals.update(
        msg=get_message,
        current_locale=current_locale,
        locale_display_name=locale_display_name,
        supported_locales=supported_locale_choices,
    )
    setattr(app, "_addressbook_i18n", True)
    LOG.debug("Message source and locale selector registered")


__all__ = [
    "NoSuchMessageError",
    "MessageSource",
    "current_locale",
    "message_source",
    "get_message",
    "select_locale",
    "configure_i18n",
]
