"""Opaque cursors for keyset pagination.

A cursor is the URL-safe base64 encoding of the last seen primary key.
"""

from __future__ import annotations

import base64
import binascii


class InvalidCursorError(ValueError):
    """Raised when a cursor does not decode to a non-negative integer."""

    pass


def encode_cursor(key: int | str) -> str:
    """Encode a primary key as an opaque cursor."""
    return base64.urlsafe_b64encode(str(key).encode()).decode()


def decode_cursor(cursor: str | None) -> int:
    """Decode a cursor back to its primary key; a missing cursor means 0.

    Raises:
        InvalidCursorError: If the cursor is not one produced by encode_cursor
    """
    if cursor is None:
        return 0
    try:
        decoded = base64.urlsafe_b64decode(cursor.encode()).decode()
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidCursorError(f"Invalid cursor: {cursor}") from e
    if not decoded.isascii() or not decoded.isdigit():
        raise InvalidCursorError(f"Invalid cursor: {cursor}")
    return int(decoded)
