"""Schema migrations.

Migrations are revision modules registered in ``versions``; the manager
applies and reverts them and records applied versions in a ledger table.
"""

from article_api.migrations.errors import (
    DuplicateMigrationError,
    InvalidMigrationError,
    MigrationActionError,
    MigrationError,
    NoAppliedMigrationsError,
    UnknownMigrationError,
)
from article_api.migrations.manager import (
    MigrationManager,
    MigrationState,
    MigrationStatus,
    cleanup_test_database,
    setup_test_database,
)
from article_api.migrations.registry import Migration, build_registry, load_migrations

__all__ = [
    "DuplicateMigrationError",
    "InvalidMigrationError",
    "Migration",
    "MigrationActionError",
    "MigrationError",
    "MigrationManager",
    "MigrationState",
    "MigrationStatus",
    "NoAppliedMigrationsError",
    "UnknownMigrationError",
    "build_registry",
    "cleanup_test_database",
    "load_migrations",
    "setup_test_database",
]
