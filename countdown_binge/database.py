"""Engine, session factory and the per-request session dependency."""

import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import get_database_url


class Base(DeclarativeBase):
    """Declarative base for the followed-show tables."""
    pass


_engine: Optional[Engine] = None
_session_maker: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # cached_show_data relies on ON DELETE CASCADE, which SQLite ignores by default
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine() -> Engine:
    """Get or create the process-wide engine."""
    global _engine
    if _engine is None:
        url = get_database_url()
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        _engine = create_engine(url, connect_args=connect_args)
    return _engine


def get_session_maker() -> sessionmaker:
    global _session_maker
    if _session_maker is None:
        _session_maker = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _session_maker


def init_database():
    """Create the followed_shows and cached_show_data tables if missing."""
    # Importing the models registers them on Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


@contextmanager
def session_scope() -> Iterator[Session]:
    """A session for work outside a request, closed on exit."""
    db = get_session_maker()()
    try:
        yield db
    finally:
        db.close()


def get_db():
    """FastAPI dependency yielding one session per request."""
    with session_scope() as db:
        yield db
