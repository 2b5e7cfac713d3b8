"""Cursor-based pagination utilities and models.

Provides encoding/decoding of opaque cursors for list endpoints, plus
Pydantic models for pagination metadata and links.
"""

from __future__ import annotations

import base64
import json
from datetime import datetime
from urllib.parse import urlencode

from pydantic import BaseModel

from notifyhub.errors import InvalidRequest


class PaginationMeta(BaseModel):
    """Pagination metadata for list responses."""

    has_next: bool
    has_prev: bool


class PaginationLinks(BaseModel):
    """Pagination links for list responses."""

    first: str
    next: str | None = None


def encode_cursor(created_at: datetime, id: str) -> str:
    """Encode a pagination cursor from a created_at timestamp and resource id.

    Args:
        created_at: The created_at timestamp of the boundary resource.
        id: The identifier of the boundary resource.

    Returns:
        A URL-safe base64-encoded cursor string.
    """
    payload = json.dumps({"c": created_at.isoformat(), "i": id})
    return base64.urlsafe_b64encode(payload.encode()).decode()


def decode_cursor(cursor: str) -> tuple[datetime, str]:
    """Decode a pagination cursor back into its components.

    Raises:
        InvalidRequest: If the cursor is malformed or contains invalid data.
    """
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
        return datetime.fromisoformat(payload["c"]), payload["i"]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidRequest(f"Invalid pagination cursor: {cursor}") from exc


def build_links(
    base_url: str,
    page_size: int,
    next_cursor: str | None = None,
    params: dict[str, str] | None = None,
) -> PaginationLinks:
    """Build first/next links, carrying filter ``params`` on each link."""
    query = {"page[size]": str(page_size), **(params or {})}
    links = PaginationLinks(first=f"{base_url}?{urlencode(query, safe='[]')}")
    if next_cursor is not None:
        next_query = {"page[after]": next_cursor, **query}
        links.next = f"{base_url}?{urlencode(next_query, safe='[]')}"
    return links
