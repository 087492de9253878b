"""Schema version detection for raw board documents."""

from __future__ import annotations

from typing import Any

from knbn.errors import MalformedDocumentError


def detect_version(raw: Any) -> str:
    """Return the schema version declared at ``metadata.version``.

    Numeric tags are accepted because YAML reads an unquoted ``0.2`` as a
    float.

    Raises:
        MalformedDocumentError: If *raw* is not a mapping, has no
            ``metadata`` mapping, or carries no usable version.
    """
    if not isinstance(raw, dict):
        raise MalformedDocumentError("Board document is not a mapping")

    metadata = raw.get("metadata")
    if not isinstance(metadata, dict):
        raise MalformedDocumentError("Board document has no metadata section")

    version = metadata.get("version")
    if isinstance(version, bool) or not isinstance(version, (str, int, float)):
        raise MalformedDocumentError("Board metadata has no version")

    tag = str(version).strip()
    if not tag:
        raise MalformedDocumentError("Board metadata has an empty version")
    return tag
