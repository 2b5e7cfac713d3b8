"""Secret store backed by the ``secrets`` table.

Endpoints never hold secret values; they hold keys into this store.
Values are written here when a caller supplies them and released when
the owning endpoint stops referencing the key.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notifyhub.models.secret import Secret

logger = logging.getLogger(__name__)


class SecretService:
    """Key-value secret storage.

    Args:
        db: Async SQLAlchemy session for database operations.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get(self, key: str) -> Secret | None:
        result = await self.db.execute(select(Secret).where(Secret.key == key))
        return result.scalar_one_or_none()

    async def put_secret(self, key: str, value: str) -> None:
        """Create or overwrite the secret stored under ``key``.

        Args:
            key: Secret key, e.g. ``<endpointID>-token``.
            value: Secret value (sensitive data).
        """
        secret = await self._get(key)
        if secret is None:
            self.db.add(Secret(key=key, value=value))
        else:
            secret.value = value
        await self.db.flush()
        logger.debug("Stored secret '%s'", key)

    async def get_secret(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None if absent."""
        secret = await self._get(key)
        return secret.value if secret is not None else None

    async def delete_secret(self, key: str) -> None:
        """Delete the secret stored under ``key``. Missing keys are ignored.

        Runs in a savepoint so a failed release can be discarded without
        rolling back the caller's other writes.
        """
        async with self.db.begin_nested():
            await self.db.execute(delete(Secret).where(Secret.key == key))
        logger.debug("Released secret '%s'", key)
