"""Database engine & session management.

One SQLAlchemy engine per process, created lazily behind a lock. Request
code uses :func:`app_session`, which commits on success and rolls back on
error.
"""
from __future__ import annotations

import os, threading
try:  # POSIX file locking for multi-worker schema creation
    import fcntl  # type: ignore
except ImportError:  # pragma: no cover - non-POSIX
    fcntl = None  # type: ignore
from contextlib import contextmanager
from typing import Optional, Iterator, Callable

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, scoped_session, Session as SASession
from sqlalchemy.pool import StaticPool

from addressbook.utils.logging import get_logger
from addressbook.db.models import Base
from addressbook import config as app_config

_engine: Optional[Engine] = None
_SessionFactory: Optional[Callable[[], SASession]] = None
_scoped: Optional[scoped_session] = None
_LOCK = threading.Lock()

LOG = get_logger("db")

MEMORY_PATH = ":memory:"


def _build_engine(db_path: str) -> Engine:
    if db_path == MEMORY_PATH:
        # A single shared connection, otherwise every pooled connection
        # would see its own empty in-memory database.
        return create_engine(
            "sqlite://",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(f"sqlite:///{db_path}", future=True)


def init_engine_once() -> None:
    global _engine, _SessionFactory, _scoped
    if _engine is not None:
        return
    with _LOCK:
        if _engine is not None:
            return
        db_path = app_config.get_db_path()
        LOG.info("Initializing address book database engine at %s", db_path)
        _engine = _build_engine(db_path)
        _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False, class_=SASession)
        _scoped = scoped_session(_SessionFactory)
        if db_path == MEMORY_PATH:
            _safe_create_schema()
            LOG.debug("in-memory schema ready")
            return
        parent_dir = os.path.dirname(os.path.abspath(db_path)) or "."
        os.makedirs(parent_dir, exist_ok=True)
        if not os.access(parent_dir, os.W_OK):
            raise RuntimeError(f"address book DB directory not writable: {parent_dir}")
        # Cross-process lock: several workers starting at once must not race
        # between the existence check and the DDL emit.
        lock_path = os.path.join(parent_dir, ".addressbook_schema.lock")
        if fcntl is not None:
            with open(lock_path, "w") as lf:
                try:
                    fcntl.flock(lf, fcntl.LOCK_EX)
                    _safe_create_schema()
                finally:
                    fcntl.flock(lf, fcntl.LOCK_UN)
        else:
            _safe_create_schema()
        LOG.debug("address book schema ready")


def _safe_create_schema():
    """Run metadata.create_all, tolerating the 'already exists' race.

    SQLite may raise OperationalError: table X already exists when another
    worker emitted the DDL between checkfirst and create.
    """
    from sqlalchemy.exc import OperationalError
    if _engine is None:
        return
    try:
        Base.metadata.create_all(_engine)  # type: ignore[arg-type]
    except OperationalError as e:  # pragma: no cover - concurrency edge
        msg = str(e).lower()
        if "already exists" in msg:
            LOG.warning("Schema create encountered existing tables (benign race)")
        else:
            raise


def get_engine() -> Engine:
    if _engine is None:
        init_engine_once()
    return _engine  # type: ignore[return-value]


def get_session_factory() -> Callable[[], SASession]:
    if _SessionFactory is None:
        init_engine_once()
    return _SessionFactory  # type: ignore[return-value]


def get_scoped_session() -> scoped_session:
    if _scoped is None:
        init_engine_once()
    if _scoped is None:
        raise RuntimeError("Scoped session could not be initialized.")
    return _scoped  # type: ignore[return-value]


@contextmanager
def app_session() -> Iterator[SASession]:
    scoped = get_scoped_session()
    sess = scoped()
    try:
        yield sess
        sess.commit()
    except Exception:
        sess.rollback()
        raise
    finally:
        sess.close()


def remove_scoped_session(_exc: Optional[BaseException] = None) -> None:
    """Release the thread's scoped session (registered as request teardown)."""
    if _scoped is not None:
        _scoped.remove()


def reset_for_tests(drop: bool = False) -> None:
    global _engine, _SessionFactory, _scoped
    with _LOCK:
        if _engine is not None and drop:
            try:
                Base.metadata.drop_all(_engine)
            except Exception:
                LOG.warning("Failed dropping tables during reset", exc_info=True)
        if _scoped is not None:
            _scoped.remove()
        if _engine is not None:
            _engine.dispose()
        _engine = None
        _SessionFactory = None
        _scoped = None


__all__ = [
    "init_engine_once",
    "get_engine",
    "get_session_factory",
    "get_scoped_session",
    "app_session",
    "remove_scoped_session",
    "reset_for_tests",
]
