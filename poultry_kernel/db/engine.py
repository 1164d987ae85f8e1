"""
Module: poultry_kernel.db.engine
Responsibility: SQLAlchemy engine initialization, session factory management,
    transactional scope, and translation of driver failures into typed
    persistence errors.  This is the single point of database connection
    configuration for the whole system.
Architecture position: Kernel > DB.  May import from db/base.py and the logging
    config.  MUST NOT import from models/, services/, selectors/, or domain/
    (except create_tables, which imports the ORM registry).

Lifecycle:
    - init_engine_from_url() once per process (idempotent overwrite).
    - get_session() / session_scope() per unit of work; components receive
      the Session by injection and never reach for a global connection.
    - reset_engine() for tests; an atexit hook disposes the pool on exit.

Invariants enforced:
    - Bounded waits: pool_timeout on checkout, statement_timeout on
      PostgreSQL, busy timeout on SQLite.  Nothing blocks indefinitely.
    - SQLite gets the pysqlite SAVEPOINT recipe (driver autocommit off,
      explicit BEGIN) so nested transactions behave like PostgreSQL's.
    - In-memory SQLite uses a StaticPool so every session sees one database.

Failure modes:
    - RuntimeError if get_engine/get_session called before init.
    - PersistenceTimeoutError / PersistenceUnavailableError from
      translate_persistence_errors().
"""

import atexit
from contextlib import contextmanager
from typing import Callable, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, DisconnectionError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from poultry_kernel.exceptions import (
    PersistenceTimeoutError,
    PersistenceUnavailableError,
)
from poultry_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None

_TIMEOUT_MARKERS = (
    "statement timeout",
    "canceling statement",
    "lock timeout",
    "database is locked",
)


def _install_sqlite_savepoint_support(engine: Engine) -> None:
    """Let SQLAlchemy, not pysqlite, emit BEGIN so SAVEPOINT works."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 10,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    pool_timeout: int = 10,
    pool_recycle: int = 1800,
    statement_timeout_ms: int = 5000,
) -> Engine:
    """
    Initialize the SQLAlchemy engine from a database URL.

    Postconditions: Module-level _engine and _SessionFactory are initialized.
        All subsequent get_engine/get_session calls use this engine.

    Args:
        database_url: PostgreSQL or SQLite connection URL.
        echo: If True, log all SQL statements.
        pool_size: Connections kept in the pool (PostgreSQL).
        max_overflow: Extra connections beyond pool_size (PostgreSQL).
        pool_pre_ping: Test connections before use.
        pool_timeout: Seconds to wait for a pooled connection.
        pool_recycle: Seconds after which a connection is recycled.
        statement_timeout_ms: Upper bound for a single statement / lock wait.

    Returns:
        SQLAlchemy Engine instance.
    """
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()

    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        connect_args = {
            "check_same_thread": False,
            "timeout": max(statement_timeout_ms / 1000, 0.001),
        }
        in_memory = database_url in ("sqlite://", "sqlite:///:memory:") or ":memory:" in database_url
        kwargs: dict = {"echo": echo, "connect_args": connect_args}
        if in_memory:
            kwargs["poolclass"] = StaticPool
        _engine = create_engine(database_url, **kwargs)
        _install_sqlite_savepoint_support(_engine)
    else:
        _engine = create_engine(
            database_url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=pool_pre_ping,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            isolation_level="READ COMMITTED",
            connect_args={"options": f"-c statement_timeout={statement_timeout_ms}"},
        )

    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info(
        "engine_initialized",
        extra={
            "dialect": _engine.dialect.name,
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "statement_timeout_ms": statement_timeout_ms,
            "echo": echo,
        },
    )
    return _engine


def get_engine() -> Engine:
    """
    Get the current engine instance.

    Raises:
        RuntimeError: If engine has not been initialized.
    """
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine


def get_session() -> Session:
    """
    Get a new session instance.

    Raises:
        RuntimeError: If engine has not been initialized.
    """
    if _SessionFactory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _SessionFactory()


def get_session_factory() -> sessionmaker[Session]:
    """Get the session factory (one session per thread / request)."""
    if _SessionFactory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _SessionFactory


@contextmanager
def translate_persistence_errors(operation: str) -> Generator[None, None, None]:
    """
    Convert driver and pool failures into typed persistence errors.

    Timeouts (pool checkout, statement_timeout, SQLite busy) become
    PersistenceTimeoutError; lost connections and other operational
    failures become PersistenceUnavailableError.  Everything else
    propagates unchanged.
    """
    try:
        yield
    except PoolTimeoutError as exc:
        logger.warning("persistence_pool_timeout", extra={"operation": operation})
        raise PersistenceTimeoutError(operation) from exc
    except DisconnectionError as exc:
        logger.warning("persistence_disconnected", extra={"operation": operation})
        raise PersistenceUnavailableError(operation) from exc
    except OperationalError as exc:
        message = str(exc.orig if exc.orig is not None else exc).lower()
        if any(marker in message for marker in _TIMEOUT_MARKERS):
            logger.warning("persistence_statement_timeout", extra={"operation": operation})
            raise PersistenceTimeoutError(operation) from exc
        logger.warning("persistence_unavailable", extra={"operation": operation})
        raise PersistenceUnavailableError(operation) from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            logger.warning("persistence_connection_invalidated", extra={"operation": operation})
            raise PersistenceUnavailableError(operation) from exc
        raise


@contextmanager
def session_scope(
    operation: str = "unit_of_work",
    factory: Callable[[], Session] | None = None,
) -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a series of operations.

    ``factory`` overrides the process-wide session factory (tests bind
    sessions to a connection they roll back).

    Postconditions: On normal exit, session is committed and closed.
        On exception, session is rolled back and closed, and the exception
        is re-raised (driver failures translated to persistence errors).

    Usage:
        with session_scope("create_distribution") as session:
            service = DistributionService(session)
            ...
    """
    with translate_persistence_errors(operation):
        session = factory() if factory is not None else get_session()
        logger.debug("transaction_started", extra={"operation": operation})
        try:
            yield session
            session.commit()
            logger.debug("transaction_committed", extra={"operation": operation})
        except Exception:
            session.rollback()
            logger.warning(
                "transaction_rolled_back",
                extra={"operation": operation},
                exc_info=True,
            )
            raise
        finally:
            session.close()


def create_tables() -> None:
    """
    Create all tables defined in the kernel and module models.

    Preconditions: Engine must be initialized via init_engine_from_url().
    """
    from poultry_kernel.db.base import Base
    from poultry_modules._orm_registry import import_all_orm_models

    engine = get_engine()
    import_all_orm_models()
    Base.metadata.create_all(engine)


def drop_tables() -> None:
    """Drop all tables. Use with caution - primarily for testing."""
    from poultry_kernel.db.base import Base
    from poultry_modules._orm_registry import import_all_orm_models

    import_all_orm_models()
    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Reset the engine and session factory. Useful for test cleanup."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
        _engine = None

    _SessionFactory = None


def _atexit_dispose():
    """Dispose the engine on process exit to release all pooled connections."""
    if _engine is not None:
        _engine.dispose()


atexit.register(_atexit_dispose)


def is_postgres() -> bool:
    """Check if the current engine is PostgreSQL."""
    if _engine is None:
        return False
    return _engine.dialect.name == "postgresql"
