"""Registration of schema migrations.

A migration is a module exposing ``revision`` (a positive integer version),
``description`` and the ``upgrade(op)`` / ``downgrade(op)`` actions, in the
same shape as an alembic revision file. Modules are listed explicitly in
``article_api.migrations.versions`` rather than discovered on disk.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from types import ModuleType

from alembic.operations import Operations

from article_api.migrations.errors import DuplicateMigrationError, InvalidMigrationError

MigrationAction = Callable[[Operations], None]


@dataclass(frozen=True)
class Migration:
    """A versioned, reversible schema change."""

    version: int
    description: str
    upgrade: MigrationAction
    downgrade: MigrationAction

    @classmethod
    def from_module(cls, module: ModuleType) -> "Migration":
        """Build a Migration from a revision module.

        Raises:
            InvalidMigrationError: If the module lacks a required attribute.
        """
        missing = [
            name for name in ("revision", "upgrade", "downgrade") if not hasattr(module, name)
        ]
        if missing:
            raise InvalidMigrationError(
                f"Migration module {module.__name__} is missing: {', '.join(missing)}"
            )
        description = getattr(module, "description", None) or module.__name__.rsplit(".", 1)[-1]
        return cls(
            version=module.revision,
            description=description,
            upgrade=module.upgrade,
            downgrade=module.downgrade,
        )


def build_registry(migrations: Iterable[Migration]) -> list[Migration]:
    """Validate migrations and return them in ascending version order.

    Gaps between versions are allowed, duplicates are not.

    Raises:
        InvalidMigrationError: If a version is not a positive integer.
        DuplicateMigrationError: If two migrations share a version.
    """
    ordered = sorted(migrations, key=lambda m: m.version)
    seen: set[int] = set()
    for migration in ordered:
        if isinstance(migration.version, bool) or not isinstance(migration.version, int):
            raise InvalidMigrationError(f"Migration version must be an integer: {migration.version!r}")
        if migration.version <= 0:
            raise InvalidMigrationError(f"Migration version must be positive: {migration.version}")
        if migration.version in seen:
            raise DuplicateMigrationError(migration.version)
        seen.add(migration.version)
    return ordered


def load_migrations(modules: Iterable[ModuleType] | None = None) -> list[Migration]:
    """Load the registered migration modules.

    Args:
        modules: Revision modules to load. Defaults to the modules listed in
            ``article_api.migrations.versions``.

    Returns:
        Migrations in ascending version order.
    """
    if modules is None:
        from article_api.migrations.versions import MIGRATION_MODULES

        modules = MIGRATION_MODULES
    return build_registry(Migration.from_module(module) for module in modules)
