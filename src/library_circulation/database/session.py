"""
Database session management for the library circulation entity store.

The store is an in-memory SQLite database by default. An in-memory database
only lives as long as its connection, so the engine uses ``StaticPool`` to
hand the same connection to every session: all repositories built on the
manager see the same data, and the data disappears when the process exits.
"""

import logging
from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_config
from ..errors import RepositoryException
from .schema import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages the engine and sessions backing the entity store.

    - Lazily created engine (single shared SQLite connection)
    - Session factory that keeps objects usable after commit
    - Schema creation and teardown
    """

    def __init__(self, database_url: str | None = None):
        """
        Initialize the database manager.

        Args:
            database_url: SQLAlchemy database URL. If None, uses the configured URL.
        """
        if database_url is None:
            database_url = get_config().database_url

        self.database_url = database_url
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            self._engine = create_engine(
                self.database_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=False,
            )
            logger.info("Database engine created: %s", self._engine.url)

        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory

    def create_session(self) -> Session:
        """Create a new database session."""
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope for database operations.

        ```python
        with db_manager.session_scope() as session:
            books = BookRepository(session).get_all()
        ```

        The session is committed on success and rolled back (then re-raised)
        on error.
        """
        session = self.create_session()
        try:
            yield session
            session.commit()
            logger.debug("Database transaction committed successfully")
        except Exception:
            logger.exception("Database error, rolling back")
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self, drop_existing: bool = False) -> None:
        """
        Create the schema.

        Args:
            drop_existing: If True, drop all tables before creating
        """
        if drop_existing:
            logger.warning("Dropping all existing tables...")
            Base.metadata.drop_all(bind=self.engine)

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database initialization complete")

    def verify_connection(self) -> bool:
        """Return True when a trivial query succeeds."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.exception("Database connection failed")
            return False

    def close(self) -> None:
        """Dispose of the engine; an in-memory store is discarded with it."""
        if self._engine:
            self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None


def safe_commit(session: Session, operation: str) -> None:
    """
    Commit a session, translating store failures.

    Raises:
        RepositoryException: If the commit fails (after rolling back)
    """
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise RepositoryException(f"Database operation '{operation}' failed: {e!s}") from e


T = TypeVar("T")


def safe_query(session: Session, query_func: Callable[[Session], T], error_msg: str) -> T:
    """
    Execute a query, translating store failures.

    Raises:
        RepositoryException: If the query fails
    """
    try:
        return query_func(session)
    except SQLAlchemyError as e:
        logger.exception("Query failed")
        raise RepositoryException(f"{error_msg}: Database query failed") from e
