"""Schema migration manager.

Applies, rolls back and reports registered migrations against a SQLite
database. Applied versions are recorded in the ``schema_migrations`` ledger
table of the same database. Each migration runs in one transaction together
with its ledger update, so the ledger only lists migrations whose action
completed.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from types import TracebackType

from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, inspect, select
from sqlalchemy.engine import Connection, Engine

from article_api.database.engine import create_db_engine, get_db_path
from article_api.migrations.errors import (
    MigrationActionError,
    NoAppliedMigrationsError,
    UnknownMigrationError,
)
from article_api.migrations.registry import Migration, build_registry, load_migrations

logger = logging.getLogger(__name__)

LEDGER_TABLE = "schema_migrations"

# SQLite keeps these next to the database file
SQLITE_SIDE_FILE_SUFFIXES = ("-wal", "-shm", "-journal")

ledger_metadata = MetaData()

ledger = Table(
    LEDGER_TABLE,
    ledger_metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("version", Integer, nullable=False, unique=True),
    Column("description", String(255), nullable=True),
    Column("applied_at", DateTime, nullable=False),
    sqlite_autoincrement=True,
)


def database_files(db_path: Path) -> list[Path]:
    """Return the database file and the side files SQLite may create next to it."""
    return [db_path, *(Path(f"{db_path}{suffix}") for suffix in SQLITE_SIDE_FILE_SUFFIXES)]


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class MigrationState(str, Enum):
    """Whether a migration has been applied."""

    PENDING = "pending"
    APPLIED = "applied"


@dataclass(frozen=True)
class MigrationStatus:
    """Status of one registered migration."""

    version: int
    description: str
    state: MigrationState
    applied_at: datetime | None = None


class MigrationManager:
    """Runs registered migrations against one database.

    The manager opens its engine lazily and can be used as a context manager
    to guarantee the engine is disposed of. It assumes it is the only
    migration run against the database.

    Example:
        >>> with MigrationManager("app.db") as manager:
        ...     manager.up()
    """

    def __init__(
        self,
        db_path: Path | str | None = None,
        migrations: Sequence[Migration] | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            db_path: Path to SQLite database file. Defaults to app.db.
            migrations: Migrations to manage. Defaults to the registered ones.
        """
        self.db_path = get_db_path(db_path)
        self.migrations = (
            build_registry(migrations) if migrations is not None else load_migrations()
        )
        self._by_version = {m.version: m for m in self.migrations}
        self._engine: Engine | None = None

    def __enter__(self) -> "MigrationManager":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def engine(self) -> Engine:
        """Engine for the managed database, created on first use."""
        if self._engine is None:
            self._engine = create_db_engine(self.db_path)
        return self._engine

    def close(self) -> None:
        """Dispose of the engine, if one was opened."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    # ========== COMMANDS ==========

    def up(self) -> list[Migration]:
        """Apply every pending migration in ascending version order.

        Stops at the first failure. Migrations applied before the failure stay
        applied and recorded.

        Returns:
            The migrations applied by this call (empty when up to date).

        Raises:
            MigrationActionError: If a migration's upgrade fails.
        """
        self._ensure_ledger()
        applied_versions = set(self._applied_rows())

        applied_now: list[Migration] = []
        for migration in self.migrations:
            if migration.version in applied_versions:
                continue
            self._apply(migration)
            applied_now.append(migration)

        if not applied_now:
            logger.info("No pending migrations")
        return applied_now

    def down(self) -> Migration:
        """Revert the most recently applied migration.

        Returns:
            The migration that was rolled back.

        Raises:
            NoAppliedMigrationsError: If nothing is applied.
            UnknownMigrationError: If the latest ledger entry is not registered.
            MigrationActionError: If the migration's downgrade fails.
        """
        version = self._latest_applied_version()
        if version is None:
            raise NoAppliedMigrationsError()

        migration = self._by_version.get(version)
        if migration is None:
            raise UnknownMigrationError(version)

        self._revert(migration)
        return migration

    def status(self) -> list[MigrationStatus]:
        """Report every registered migration as applied or pending.

        Does not create the ledger table or modify the database.
        """
        applied = self._applied_rows()
        return [
            MigrationStatus(
                version=m.version,
                description=m.description,
                state=MigrationState.APPLIED if m.version in applied else MigrationState.PENDING,
                applied_at=applied.get(m.version),
            )
            for m in self.migrations
        ]

    def reset(self) -> list[Migration]:
        """Delete the database file and apply all migrations from scratch.

        Destructive: every row in the database is lost.

        Returns:
            The migrations applied to the fresh database.
        """
        self.close()
        for path in database_files(self.db_path):
            if path.exists():
                logger.info("Removing %s", path)
                path.unlink()
        return self.up()

    # ========== INTERNALS ==========

    def _apply(self, migration: Migration) -> None:
        logger.info("Applying migration %d: %s", migration.version, migration.description)
        try:
            with self.engine.begin() as conn:
                migration.upgrade(self._operations(conn))
                conn.execute(
                    ledger.insert().values(
                        version=migration.version,
                        description=migration.description,
                        applied_at=utc_now(),
                    )
                )
        except Exception as e:
            raise MigrationActionError(migration.version, "up", e) from e

    def _revert(self, migration: Migration) -> None:
        logger.info("Reverting migration %d: %s", migration.version, migration.description)
        try:
            with self.engine.begin() as conn:
                migration.downgrade(self._operations(conn))
                conn.execute(ledger.delete().where(ledger.c.version == migration.version))
        except Exception as e:
            raise MigrationActionError(migration.version, "down", e) from e

    @staticmethod
    def _operations(conn: Connection) -> Operations:
        return Operations(MigrationContext.configure(conn))

    def _ensure_ledger(self) -> None:
        with self.engine.begin() as conn:
            ledger.create(conn, checkfirst=True)

    def _database_exists(self) -> bool:
        # Reading must not create an empty database file
        return self._engine is not None or self.db_path.exists()

    def _has_ledger(self, conn: Connection) -> bool:
        return inspect(conn).has_table(LEDGER_TABLE)

    def _applied_rows(self) -> dict[int, datetime]:
        """Map applied versions to their application time.

        A missing ledger table means nothing has been applied yet.
        """
        if not self._database_exists():
            return {}
        with self.engine.connect() as conn:
            if not self._has_ledger(conn):
                return {}
            rows = conn.execute(select(ledger.c.version, ledger.c.applied_at)).all()
        return {row.version: row.applied_at for row in rows}

    def _latest_applied_version(self) -> int | None:
        if not self._database_exists():
            return None
        with self.engine.connect() as conn:
            if not self._has_ledger(conn):
                return None
            return conn.execute(
                select(ledger.c.version).order_by(ledger.c.id.desc()).limit(1)
            ).scalar_one_or_none()


def setup_test_database(db_path: Path | str) -> Engine:
    """Create a fresh, fully migrated database and return an engine for it.

    Any existing database at ``db_path`` is removed first. The caller owns
    the returned engine.
    """
    with MigrationManager(db_path) as manager:
        manager.reset()
    return create_db_engine(db_path)


def cleanup_test_database(db_path: Path | str) -> None:
    """Remove a database created by setup_test_database."""
    for path in database_files(Path(db_path)):
        path.unlink(missing_ok=True)
