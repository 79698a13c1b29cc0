"""Database connection and session management.

This module provides engine creation, session factories and table
initialisation for the SQL storage backend.
"""

from typing import Any

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from conqueror.config import get_settings
from conqueror.models import Base


def _configure_sqlite_wal(
    dbapi_connection: Any, connection_record: Any  # noqa: ARG001
) -> None:
    """Configure SQLite to use WAL mode for better concurrency.

    Args:
        dbapi_connection: The DBAPI connection
        connection_record: Connection record (required by SQLAlchemy event API)
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str | None = None, *, echo: bool | None = None) -> Engine:
    """Create and configure the database engine.

    Args:
        url: SQLAlchemy URL, defaults to ``Settings.database_url``
        echo: Log SQL statements, defaults to ``Settings.database_echo``

    Returns:
        Engine: Configured SQLAlchemy engine

    Note:
        For SQLite databases, automatically configures WAL mode and foreign keys.
    """
    settings = get_settings()
    url = url or settings.database_url
    echo = settings.database_echo if echo is None else echo

    engine = create_engine(url, echo=echo, pool_pre_ping=True)
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _configure_sqlite_wal)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to ``engine``."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Initialize the database by creating all tables."""
    Base.metadata.create_all(bind=engine)


def check_database_health(engine: Engine) -> bool:
    """Check if the database is accessible.

    Returns:
        bool: True if a trivial query succeeds
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


def get_table_names(engine: Engine) -> list[str]:
    """Get list of all table names in the database."""
    return inspect(engine).get_table_names()
