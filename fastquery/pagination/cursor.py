"""Opaque cursor encoding for cursor-based pagination."""

import base64
from datetime import datetime
from typing import Optional

from fastquery.errors.exceptions import InvalidCursorError
from fastquery.pagination.types import CursorData


def encode_cursor(data: CursorData) -> str:
    """Encode cursor data as URL-safe base64 JSON.

    Args:
        data: Cursor position to encode

    Returns:
        Opaque cursor string
    """
    payload = data.model_dump_json(exclude_none=True).encode("utf-8")
    return base64.urlsafe_b64encode(payload).decode("ascii")


def decode_cursor(cursor: str) -> CursorData:
    """Decode a cursor produced by ``encode_cursor``.

    Args:
        cursor: Opaque cursor string

    Returns:
        Decoded cursor data

    Raises:
        InvalidCursorError: If the cursor is empty, not URL-safe base64 or
            not a JSON cursor payload
    """
    if not cursor:
        raise InvalidCursorError("Empty cursor provided")

    try:
        raw = base64.b64decode(cursor.encode("ascii"), altchars=b"-_", validate=True)
        return CursorData.model_validate_json(raw)
    except ValueError as e:
        # binascii.Error, UnicodeError and pydantic's ValidationError
        raise InvalidCursorError(
            f"Invalid cursor format: {e}", details={"cursor": cursor}
        ) from e


def create_cursor(
    item_id: int,
    created_at: Optional[datetime] = None,
    sort_value: Optional[str] = None,
) -> str:
    """Create a cursor pointing at an item."""
    return encode_cursor(
        CursorData(id=item_id, created_at=created_at, sort_value=sort_value)
    )


def extract_cursor_id(cursor: str) -> int:
    """Return the item id stored in a cursor, or 0 if it cannot be decoded."""
    if not cursor:
        return 0
    try:
        return decode_cursor(cursor).id
    except InvalidCursorError:
        return 0


def validate_cursor(cursor: str) -> bool:
    """Check whether a cursor decodes."""
    if not cursor:
        return False
    try:
        decode_cursor(cursor)
    except InvalidCursorError:
        return False
    return True
