"""Migration errors."""


class MigrationError(Exception):
    """Base class for migration failures."""

    pass


class InvalidMigrationError(MigrationError):
    """Raised when a migration definition is malformed."""

    pass


class DuplicateMigrationError(MigrationError):
    """Raised when two migrations are registered with the same version."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"Duplicate migration version: {version}")


class MigrationActionError(MigrationError):
    """Raised when a migration's up or down action fails.

    The failed migration's transaction has been rolled back, so the ledger
    does not record it.
    """

    def __init__(self, version: int, action: str, cause: BaseException) -> None:
        self.version = version
        self.action = action
        self.cause = cause
        super().__init__(f"Migration {version} failed during {action}: {cause}")


class NoAppliedMigrationsError(MigrationError):
    """Raised when rolling back with no migration applied."""

    def __init__(self) -> None:
        super().__init__("No applied migrations to roll back")


class UnknownMigrationError(MigrationError):
    """Raised when the ledger records a version with no registered migration."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"Applied migration {version} is not registered")
