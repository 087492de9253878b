"""Base class for single-step board schema migrations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseMigration(ABC):
    """One deterministic step from ``source_version`` to ``target_version``.

    Subclasses implement :meth:`apply` as a pure transformation: the input
    document is never mutated and a new document is returned. Any structural
    assumption the step cannot satisfy must raise
    :class:`~knbn.errors.MigrationStepError` rather than produce a partially
    migrated result.
    """

    source_version: str = ""
    target_version: str = ""
    description: str = ""

    @property
    def migration_id(self) -> str:
        return f"{self.source_version}->{self.target_version}"

    @abstractmethod
    def apply(self, document: dict[str, Any]) -> dict[str, Any]:
        """Return a new document at ``target_version``."""
