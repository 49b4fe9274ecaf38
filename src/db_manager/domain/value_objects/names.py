"""Validation for database, collection and table names.

Names typed at a prompt end up in connection strings, file paths and SQL
identifiers, so they are checked once here before any backend sees them.
"""

from __future__ import annotations

from enum import Enum

from db_manager.domain.errors import InvalidNameError

MAX_NAME_LENGTH = 64
"""MySQL identifier limit, also applied to the other backends for portability."""

_DATABASE_FORBIDDEN = frozenset('/\\. "$*<>:|?\x00')
_COLLECTION_FORBIDDEN = frozenset("$\x00")


class NameKind(Enum):
    """What a validated name refers to."""

    DATABASE = "database"
    DATABASE_FILE = "database file"
    COLLECTION = "collection"


def validate_name(name: str, kind: NameKind = NameKind.COLLECTION) -> str:
    """Validate and normalize a name.

    Args:
        name: Raw name, usually user input.
        kind: What the name refers to.

    Returns:
        The name with surrounding whitespace removed.

    Raises:
        InvalidNameError: If the name is empty, too long or contains
            characters the backends reject.

    Example:
        >>> validate_name("  users ")
        'users'
    """
    if not isinstance(name, str):
        raise InvalidNameError(f"{kind.value} name must be a string, got {type(name).__name__}")

    cleaned = name.strip()
    if not cleaned:
        raise InvalidNameError(f"{kind.value} name must not be empty")
    if kind is NameKind.DATABASE_FILE:
        if "\x00" in cleaned:
            raise InvalidNameError(f"{kind.value} name must not contain NUL")
        return cleaned
    if len(cleaned) > MAX_NAME_LENGTH:
        raise InvalidNameError(
            f"{kind.value} name exceeds {MAX_NAME_LENGTH} characters: {cleaned[:16]}..."
        )

    forbidden = _DATABASE_FORBIDDEN if kind is NameKind.DATABASE else _COLLECTION_FORBIDDEN
    bad = sorted({ch for ch in cleaned if ch in forbidden})
    if bad:
        shown = ", ".join(repr(ch) for ch in bad)
        raise InvalidNameError(f"{kind.value} name {cleaned!r} contains forbidden characters: {shown}")

    if kind is NameKind.COLLECTION and cleaned.startswith("system."):
        raise InvalidNameError(f"collection name {cleaned!r} uses the reserved 'system.' prefix")

    return cleaned
