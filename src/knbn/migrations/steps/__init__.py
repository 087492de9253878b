"""Registered board schema migration steps.

Importing this package registers every step with the MigrationRegistry.
Add new steps here and bump ``CURRENT_VERSION`` in ``knbn.migrations.chain``.
"""

from __future__ import annotations

from . import m_0_1_flatten_configuration  # noqa: F401
