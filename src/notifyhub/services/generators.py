"""Default identifier and time generators."""

from __future__ import annotations

from datetime import UTC, datetime

from notifyhub.models.base import new_id


class RandomIDGenerator:
    """Generates random 16-character hex identifiers."""

    def generate(self) -> str:
        return new_id()


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)
