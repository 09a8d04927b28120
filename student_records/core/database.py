"""Database connection and session management."""

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Annotated, Any

from fastapi import Depends, Request
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


class Database:
    """Explicitly managed persistence handle.

    Owns the engine and session factory. Nothing is connected until
    ``open()`` is called, and ``close()`` disposes of the pool.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> None:
        """Create the engine and session factory."""
        if self._engine is not None:
            return

        engine_kwargs: dict[str, Any] = {"echo": self.echo}
        if self.url.startswith("sqlite"):
            # FastAPI serves sync endpoints from a threadpool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                pool_pre_ping=True,
                pool_size=10,
                max_overflow=20,
            )

        self._engine = create_engine(self.url, **engine_kwargs)

        if self.url.startswith("sqlite"):
            @event.listens_for(self._engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self._session_factory = sessionmaker(
            bind=self._engine,
            class_=Session,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )
        logger.info(f"Database opened ({self._engine.url.render_as_string(hide_password=True)})")

    def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database closed")

    def create_tables(self) -> None:
        """Create all tables directly (local SQLite and tests).

        Shared databases are managed through Alembic migrations instead.
        """
        # Register models with Base.metadata
        import student_records.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        import student_records.models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations."""
        session = self.session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def get_database(request: Request) -> Database:
    """Get the database handle attached to the running application."""
    return request.app.state.database


def get_db(
    database: Annotated[Database, Depends(get_database)],
) -> Generator[Session, None, None]:
    """Get database session dependency."""
    with database.session_scope() as session:
        yield session


# Type alias for dependency injection
DbSession = Annotated[Session, Depends(get_db)]
