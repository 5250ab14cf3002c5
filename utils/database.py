"""
Database utilities and engine management.

This module provides the core database engine that can be used by any layer:
- API routes
- Services
- Repositories
- Scripts

No dependencies on higher-level modules (api, services).
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Generator, Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlmodel import create_engine, Session

from config.settings import settings


def build_engine(db_url: str, **kwargs) -> Engine:
    """
    Create an engine for the given URL.

    PostgreSQL URLs are routed through the psycopg (v3) driver; SQLite URLs get
    `check_same_thread=False` so a session may be handed between threads.
    """
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+psycopg://", 1)

    if db_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(db_url, connect_args=connect_args, **kwargs)

        @event.listens_for(engine, "connect")
        def configure_sqlite(dbapi_conn, connection_record):
            # Let SQLAlchemy emit BEGIN itself so SAVEPOINTs behave
            dbapi_conn.isolation_level = None
            cursor = dbapi_conn.cursor()
            # ON DELETE CASCADE needs foreign keys switched on
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def begin_sqlite(conn):
            conn.exec_driver_sql("BEGIN")

        return engine

    return create_engine(
        db_url,
        connect_args={
            "prepare_threshold": None,  # Disable prepared statements for pooler compatibility
            "connect_timeout": 10,
        },
        pool_pre_ping=True,  # Verify connection before use
        pool_recycle=300,
        pool_size=5,
        max_overflow=5,
        pool_timeout=30,
        **kwargs,
    )


@lru_cache()
def get_engine() -> Engine:
    """
    Get cached database engine.

    Returns:
        SQLAlchemy engine singleton
    """
    if not settings.DATABASE_URL:
        raise RuntimeError("DATABASE_URL is not configured")
    return build_engine(settings.DATABASE_URL)


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Yields:
        SQLModel Session that auto-closes after request

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            ...
    """
    engine = get_engine()
    with Session(engine) as session:
        yield session


# PostgreSQL serialization_failure, deadlock_detected, lock_not_available
LOCK_CONFLICT_SQLSTATES = {"40001", "40P01", "55P03"}


def is_lock_conflict(exc: OperationalError) -> bool:
    """
    True when a write lost a lock race to a concurrent transaction.

    SQLite refuses the loser's upgrade to a write lock with "database is
    locked"; PostgreSQL reports a serialization failure or deadlock.
    """
    orig = getattr(exc, "orig", None)
    if getattr(orig, "sqlstate", None) in LOCK_CONFLICT_SQLSTATES:
        return True
    message = str(orig or exc)
    return "database is locked" in message or "database table is locked" in message


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Run a block of repository calls as one all-or-nothing transaction.

    Commits when the block exits normally and rolls back on any exception,
    which is re-raised. Repository writes inside the block must be called with
    `commit=False` so they only flush.

    Usage:
        with atomic(db):
            repo.clear_flags(..., commit=False)
            repo.set_flag(..., commit=False)
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
