"""
Database session management.

Provides explicit ORM session handling with SQLAlchemy.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from dhab.core.config import Config
from dhab.core.models import Base

_engines: Dict[str, Engine] = {}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(config: Config) -> Engine:
    """
    Get the SQLAlchemy engine for this config.

    Uses SQLite with WAL mode unless a database URL is configured.
    One engine is kept per URL.
    """
    url = config.get_database_url()
    if url in _engines:
        return _engines[url]

    if url.startswith("sqlite:///"):
        db_path = Path(config.database_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)

        engine = create_engine(url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

        # Enable WAL mode for better concurrent access
        with engine.connect() as conn:
            conn.execute(text("PRAGMA journal_mode=WAL"))
            conn.commit()
    else:
        engine = create_engine(url, pool_pre_ping=True)

    _engines[url] = engine
    return engine


def dispose_engines() -> None:
    """Close all pooled connections and forget cached engines."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()


def init_db(config: Config) -> None:
    """
    Initialize database schema.

    Creates all tables if they don't exist.
    """
    engine = get_engine(config)
    Base.metadata.create_all(engine)


def get_session(config: Config) -> Session:
    """
    Create a new database session.

    Remember to close or use as context manager.
    """
    engine = get_engine(config)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    return SessionLocal()


@contextmanager
def session_scope(config: Config) -> Generator[Session, None, None]:
    """
    Provide transactional scope around a series of operations.

    Usage:
        with session_scope(config) as session:
            session.add(record)
    """
    session = get_session(config)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
