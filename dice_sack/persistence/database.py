"""
Database setup for the durable history store.
Uses a SQLite file locally; set DICE_SACK_DATABASE_URL (e.g. Postgres) to point elsewhere.
"""

import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

DATABASE_URL_ENV = "DICE_SACK_DATABASE_URL"
DEFAULT_DB_FILE = "dice_sack.db"


def resolve_database_url(url: str = None) -> str:
    """
    Pick the database URL: explicit argument, then the environment, then a local SQLite file.
    Legacy postgres:// URLs are rewritten to postgresql://, which SQLAlchemy 2.x expects.
    """
    raw_url = url or os.environ.get(DATABASE_URL_ENV)
    if raw_url and raw_url.startswith("postgres://"):
        return raw_url.replace("postgres://", "postgresql://", 1)
    if raw_url:
        return raw_url
    return f"sqlite:///{os.path.abspath(DEFAULT_DB_FILE)}"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str = None, echo: bool = False) -> Engine:
    """
    Create an engine for the resolved URL. In-memory SQLite shares one connection so every
    session sees the same database.
    """
    database_url = resolve_database_url(url)
    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        # SQLite needs check_same_thread=False; Postgres does not use that arg
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **kwargs)
    if database_url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def init_db(engine: Engine) -> None:
    """Create all tables."""
    Base.metadata.create_all(bind=engine)


def make_session_factory(url: str = None, echo: bool = False) -> sessionmaker:
    """Engine + tables + session factory in one call, for the shells and tests."""
    engine = make_engine(url, echo=echo)
    init_db(engine)
    return sessionmaker(autoflush=False, bind=engine, expire_on_commit=False)
