"""Database engine and session management."""

import logging
import os
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

# Default database path, relative to the working directory
DEFAULT_DB_PATH = Path("app.db")

DB_PATH_ENV = "ARTICLE_API_DB_PATH"


class DatabaseNotFoundError(Exception):
    """Raised when the database file does not exist at startup."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        super().__init__(
            f"Database file does not exist: {db_path}\n"
            "Please run migrations first: article-api migrate up"
        )


def get_db_path(db_path: Path | str | None = None) -> Path:
    """Resolve the database path.

    Priority:
        1. Explicit db_path argument
        2. ARTICLE_API_DB_PATH environment variable
        3. Default path (app.db)
    """
    if db_path:
        return Path(db_path)
    env_path = os.environ.get(DB_PATH_ENV)
    if env_path:
        return Path(env_path)
    return DEFAULT_DB_PATH


def get_database_url(db_path: Path | str | None = None) -> str:
    """Construct the SQLite URL for a database path.

    Args:
        db_path: Optional path to SQLite database file.

    Returns:
        Database URL string (e.g., "sqlite:///app.db").
    """
    return f"sqlite:///{get_db_path(db_path)}"


def _enable_sqlite_transactions(engine: Engine) -> None:
    """Make pysqlite run every statement, DDL included, inside BEGIN/COMMIT.

    The sqlite3 driver only opens transactions implicitly before DML, so a
    CREATE TABLE would otherwise commit on its own.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        # WAL gives better concurrent read/write access
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def create_db_engine(db_path: Path | str | None = None, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for the given database.

    The engine is the process-wide store handle: callers own it and are
    responsible for disposing of it. Connecting creates the database file
    if it does not exist yet.

    Args:
        db_path: Path to SQLite database file. Defaults to app.db.
        echo: Whether to echo SQL statements.

    Returns:
        SQLAlchemy Engine instance.
    """
    path = get_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        get_database_url(path),
        echo=echo,
        connect_args={
            "check_same_thread": False,
            "timeout": 30,  # SQLite busy timeout in seconds
        },
    )
    _enable_sqlite_transactions(engine)
    return engine


def ping(engine: Engine) -> None:
    """Check that the database answers a trivial query.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the connection cannot be used.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


@contextmanager
def open_database(db_path: Path | str | None = None, echo: bool = False) -> Generator[Engine, None, None]:
    """Open an existing database for serving requests.

    The database must already exist (it is created by the migrations). The
    engine is disposed of on every exit path, including a failed ping.

    Args:
        db_path: Path to SQLite database file.
        echo: Whether to echo SQL statements.

    Yields:
        Connected SQLAlchemy Engine.

    Raises:
        DatabaseNotFoundError: If the database file does not exist.
        sqlalchemy.exc.SQLAlchemyError: If the database cannot be reached.
    """
    path = get_db_path(db_path)
    if not path.exists():
        raise DatabaseNotFoundError(path)

    engine = create_db_engine(path, echo=echo)
    try:
        ping(engine)
        logger.info("Connected to database %s", path)
        yield engine
    finally:
        engine.dispose()


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to the engine."""
    return sessionmaker(autoflush=False, bind=engine, expire_on_commit=False)


@contextmanager
def get_session(engine: Engine) -> Generator[Session, None, None]:
    """Get a database session as a context manager.

    Args:
        engine: SQLAlchemy engine.

    Yields:
        Database session.
    """
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
