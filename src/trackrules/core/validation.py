"""Validation utilities.

This module provides pure functions for validating and comparing the opaque
identifiers handed to us by the media server (users, series, libraries).
Those are usually GUIDs, which the server renders either dashed or as 32 hex
digits depending on the endpoint.
"""

import re
import uuid

# Pre-compiled patterns for performance
_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{4}-?[0-9a-f]{12}$",
    re.IGNORECASE,
)
_SAFE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def is_valid_uuid(value: str) -> bool:
    """Check if a string is a GUID in dashed or 32-hex form.

    Args:
        value: String to validate.

    Returns:
        True if valid UUID format, False otherwise.
    """
    return bool(_UUID_PATTERN.match(value))


def is_safe_identifier(value: str) -> bool:
    """Check if a string is usable as an identifier and a file name stem."""
    return bool(_SAFE_ID_PATTERN.match(value))


def canonical_id(value: str) -> str:
    """Return the canonical form of an identifier.

    GUIDs become 32 lower-case hex digits; anything else is returned
    stripped but otherwise unchanged.
    """
    stripped = value.strip()
    if is_valid_uuid(stripped):
        return uuid.UUID(stripped).hex
    return stripped


def same_identifier(first: str | None, second: str | None) -> bool:
    """Compare two identifiers, treating GUID spellings as equal.

    Missing or blank identifiers never match.
    """
    if not first or not second:
        return False
    left = canonical_id(first)
    right = canonical_id(second)
    if not left or not right:
        return False
    return left == right
