"""User-to-resource ownership mappings.

Only the bookkeeping needed by notification endpoints lives here: record
the creating user as owner, look up the resources a user can see, and drop
mappings when a resource goes away. Authorization decisions are made
elsewhere.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notifyhub.models.ownership import ResourceMapping

logger = logging.getLogger(__name__)

OWNER = "owner"


class OwnershipService:
    """Service for user/resource mapping operations.

    Args:
        db: Async SQLAlchemy session for database operations.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_owner_mapping(
        self, resource_id: str, resource_type: str, user_id: str
    ) -> None:
        self.db.add(
            ResourceMapping(
                resource_id=resource_id,
                resource_type=resource_type,
                user_id=user_id,
                user_type=OWNER,
            )
        )
        await self.db.flush()

    async def find_resource_ids_for_user(
        self, user_id: str, resource_type: str
    ) -> list[str]:
        result = await self.db.execute(
            select(ResourceMapping.resource_id).where(
                ResourceMapping.user_id == user_id,
                ResourceMapping.resource_type == resource_type,
            )
        )
        return list(result.scalars().all())

    async def delete_resource_mappings(self, resource_id: str) -> None:
        """Drop every user mapping for a resource.

        Runs in a savepoint so a failure can be discarded without
        rolling back the caller's other writes.
        """
        async with self.db.begin_nested():
            result = await self.db.execute(
                delete(ResourceMapping).where(ResourceMapping.resource_id == resource_id)
            )
        logger.debug(
            "Removed %d ownership mapping(s) for resource '%s'", result.rowcount, resource_id
        )
