"""
Database handle and session helpers.

The engine and session factory live on an explicitly constructed `Database`
object created at application startup (see `main.lifespan`) and disposed at
shutdown. Request handlers receive sessions through the `get_db` dependency.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless the pragma is set per connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Database:
    """
    Owns the SQLAlchemy engine and session factory for one process.

    Usage:
        database = Database(settings.DATABASE_URL)
        database.init()
        with database.session() as db:
            ...
        database.close()
    """

    def __init__(self, url: str):
        self.url = url
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def init(self) -> None:
        if self.engine is not None:
            return

        if self.is_sqlite:
            self.engine = create_engine(self.url, connect_args={"check_same_thread": False})
            enable_sqlite_foreign_keys(self.engine)
        else:
            self.engine = create_engine(
                self.url,
                pool_pre_ping=True,  # Verify connections before using them
                pool_size=10,
                max_overflow=20
            )

        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info("Database engine initialized")

    def create_all(self) -> None:
        """Create every table. Production schemas are managed by Alembic instead."""
        import app.models  # noqa: F401  (registers models on Base.metadata)

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database.init() must be called before opening sessions")
        return self._session_factory()

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database engine disposed")
        self.engine = None
        self._session_factory = None


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Run a group of writes as one transaction.

    Commits when the block exits normally; on any exception every pending
    write in the block is rolled back and the exception re-raised.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
