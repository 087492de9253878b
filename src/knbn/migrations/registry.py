"""Migration registry for the board schema chain."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Type

from packaging.version import Version

if TYPE_CHECKING:
    from .base import BaseMigration


class MigrationRegistry:
    """Registry of all migration steps, keyed by the version they start from."""

    _migrations: Dict[str, Type["BaseMigration"]] = {}

    @classmethod
    def register(
        cls, migration_class: Type["BaseMigration"]
    ) -> Type["BaseMigration"]:
        """Decorator to register a migration class.

        Args:
            migration_class: The migration class to register

        Returns:
            The same migration class (for decorator use)

        Raises:
            ValueError: If the versions are not set, or another step is
                already registered for the same source version
        """
        source = migration_class.source_version
        if not source or not migration_class.target_version:
            raise ValueError(
                f"Migration {migration_class.__name__} must set source_version and target_version"
            )
        existing = cls._migrations.get(source)
        if existing is not None and existing is not migration_class:
            raise ValueError(
                f"Migration {migration_class.__name__} conflicts with "
                f"{existing.__name__}: both start from version {source}"
            )
        cls._migrations[source] = migration_class
        return migration_class

    @classmethod
    def get(cls, source_version: str) -> "BaseMigration | None":
        """Get the step that starts from *source_version*, if any."""
        migration_class = cls._migrations.get(source_version)
        return migration_class() if migration_class else None

    @classmethod
    def get_all(cls) -> List["BaseMigration"]:
        """Get all migrations as instances, ordered by source version."""
        instances = [m() for m in cls._migrations.values()]
        return sorted(instances, key=lambda m: Version(m.source_version))

    @classmethod
    def source_versions(cls) -> List[str]:
        return [m.source_version for m in cls.get_all()]

    @classmethod
    def clear(cls) -> None:
        """Clear all registered migrations (for testing)."""
        cls._migrations.clear()
