"""Database connection handling and the unit of work.

The process entry point builds one :class:`Database` and passes it to the
trade engine and marketplace. Each economy operation runs inside
:meth:`Database.unit_of_work`, which commits on success, rolls back on any
exception and turns infrastructure failures into
:class:`~marcoland.errors.StoreUnavailable`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, func, inspect, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DataError, DBAPIError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from marcoland.config import Settings, get_settings
from marcoland.errors import InvalidRange, StoreUnavailable
from marcoland.models import Base, seed_equipment_catalog

logger = logging.getLogger(__name__)

# Execution option marking connections that only read
READ_ONLY = "marcoland_read_only"


def _configure_sqlite(
    dbapi_connection: Any, connection_record: Any  # noqa: ARG001
) -> None:
    """Prepare a fresh SQLite connection.

    Args:
        dbapi_connection: The DBAPI connection
        connection_record: Connection record (required by SQLAlchemy event API)

    Note:
        pysqlite's implicit transaction handling is disabled so that
        :func:`_begin_sqlite` controls when the write lock is taken.
    """
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_sqlite(conn: Any) -> None:
    """Start SQLite write transactions holding the database write lock.

    SQLite ignores ``SELECT ... FOR UPDATE``; taking the lock at BEGIN gives
    the same read-check-write serialization row locks give on PostgreSQL.
    Read-only connections begin deferred and read a WAL snapshot without
    waiting for writers.
    """
    if conn.get_execution_options().get(READ_ONLY):
        conn.exec_driver_sql("BEGIN")
    else:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(settings: Settings | None = None) -> Engine:
    """Create and configure the database engine.

    Args:
        settings: Settings to read the URL and pool options from

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    settings = settings or get_settings()

    if settings.DATABASE_URL.startswith("sqlite"):
        engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_pre_ping=True,
            connect_args={
                "timeout": settings.DATABASE_BUSY_TIMEOUT,
                "check_same_thread": False,
            },
        )
        event.listen(engine, "connect", _configure_sqlite)
        event.listen(engine, "begin", _begin_sqlite)
    else:
        engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_pre_ping=True,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_recycle=settings.DATABASE_POOL_RECYCLE,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        )

    return engine


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError, PoolTimeoutError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


class Database:
    """Store handle owning the engine and session factory."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.reader = engine.execution_options(**{READ_ONLY: True})
        self._session_factory: sessionmaker[Session] = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )
        self._reader_factory: sessionmaker[Session] = sessionmaker(
            bind=self.reader,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Database:
        return cls(create_db_engine(settings))

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    def session(self) -> Session:
        """Open a bare session; the caller owns its lifecycle."""
        return self._session_factory()

    @contextmanager
    def unit_of_work(self, *, read_only: bool = False) -> Iterator[Session]:
        """Run a block as a single transaction.

        Args:
            read_only: The block only reads. On SQLite it then neither takes
                nor waits for the write lock.

        Yields:
            Session bound to a transaction that commits when the block exits
            cleanly and rolls back otherwise.

        Raises:
            StoreUnavailable: If the store failed (lost connection, lock or
                pool timeout). Nothing from the block has been applied.
            InvalidRange: If the store rejected a value as out of range.
        """
        factory = self._reader_factory if read_only else self._session_factory
        session = factory()
        try:
            with session.begin():
                yield session
        except Exception as exc:
            if _is_transient(exc):
                logger.warning("unit of work rolled back after store failure: %s", exc)
                raise StoreUnavailable(detail=type(exc).__name__) from exc
            if isinstance(exc, DataError):
                logger.warning("unit of work rolled back after rejected value: %s", exc)
                raise InvalidRange("Value out of range for the ledger store") from exc
            raise
        finally:
            session.close()

    def create_schema(self) -> None:
        """Create all tables directly, without migrations."""
        Base.metadata.create_all(bind=self.engine)

    def seed_catalog(self) -> int:
        with self.session() as session:
            inserted = seed_equipment_catalog(session)
        if inserted:
            logger.info("seeded %d equipment definitions", inserted)
        return inserted

    def check_health(self) -> bool:
        """Return True when the store answers a trivial query."""
        try:
            with self.reader.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:  # noqa: BLE001
            logger.warning("database health check failed", exc_info=True)
            return False
        return True

    def table_names(self) -> list[str]:
        return inspect(self.engine).get_table_names()

    def dispose(self) -> None:
        self.engine.dispose()


def count_rows(session: Session, table_name: str) -> int:
    """Count rows in a specific table.

    Args:
        session: Database session
        table_name: Name of the table to count; must exist in the schema

    Returns:
        int: Number of rows in the table

    Raises:
        ValueError: If table_name is not a valid table in the schema
    """
    if table_name not in Base.metadata.tables:
        valid_tables = sorted(Base.metadata.tables.keys())
        raise ValueError(
            f"Invalid table name: {table_name}. Valid tables: {', '.join(valid_tables)}"
        )

    table = Base.metadata.tables[table_name]
    result = session.execute(select(func.count()).select_from(table)).scalar()
    return result or 0
