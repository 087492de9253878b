"""Exception hierarchy for knbn board files and migrations."""

from __future__ import annotations


class MigrationError(Exception):
    """Base exception for board migration errors."""


class ConfigurationError(MigrationError):
    """Raised when a batch migration is invoked without a usable target set.

    This is the only error that aborts a whole batch call. Every other
    failure is captured on the affected file's result.
    """


class MalformedDocumentError(MigrationError):
    """Board content cannot be decoded or lacks ``metadata.version``."""


class UnsupportedVersionError(MigrationError):
    """Board version is well-formed but no migration path leads to current."""

    def __init__(self, version: str, message: str | None = None):
        self.version = version
        super().__init__(message or f"Unsupported board version {version}")


class MigrationStepError(MigrationError):
    """A migration step found the document violating its structural assumptions."""

    def __init__(self, step: str, reason: str):
        self.step = step
        self.reason = reason
        super().__init__(f"{step}: {reason}")
