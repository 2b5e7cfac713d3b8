"""Label lookups and label-to-resource mappings.

Labels themselves are managed elsewhere; this service only reads them and
maintains the mappings that attach them to notification endpoints.
"""

from __future__ import annotations

import json
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notifyhub.errors import NotFound
from notifyhub.models.label import Label, LabelMapping
from notifyhub.schemas.endpoint import LabelAttributes

logger = logging.getLogger(__name__)


def _to_attrs(label: Label) -> LabelAttributes:
    return LabelAttributes(
        id=label.id,
        name=label.name,
        properties=json.loads(label.properties or "{}"),
    )


class LabelService:
    """Service for label lookup and label mapping operations.

    Args:
        db: Async SQLAlchemy session for database operations.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_label_by_id(self, label_id: str) -> LabelAttributes | None:
        label = await self.db.get(Label, label_id)
        return _to_attrs(label) if label is not None else None

    async def find_resource_labels(self, resource_id: str) -> list[LabelAttributes]:
        """Return the labels attached to a resource, ordered by name."""
        result = await self.db.execute(
            select(Label)
            .join(LabelMapping, LabelMapping.label_id == Label.id)
            .where(LabelMapping.resource_id == resource_id)
            .order_by(Label.name.asc(), Label.id.asc())
        )
        return [_to_attrs(label) for label in result.scalars().all()]

    async def create_label_mapping(
        self, label_id: str, resource_id: str, resource_type: str
    ) -> None:
        """Attach a label to a resource. Attaching twice is a no-op.

        The insert runs in a savepoint so a failure here does not poison
        the surrounding unit of work.

        Raises:
            NotFound: If the label does not exist.
        """
        if await self.db.get(Label, label_id) is None:
            raise NotFound(f"Label not found: {label_id}")

        existing = await self.db.execute(
            select(LabelMapping.id).where(
                LabelMapping.label_id == label_id,
                LabelMapping.resource_id == resource_id,
            )
        )
        if existing.first() is not None:
            return

        async with self.db.begin_nested():
            self.db.add(
                LabelMapping(
                    label_id=label_id,
                    resource_id=resource_id,
                    resource_type=resource_type,
                )
            )

    async def delete_label_mapping(self, label_id: str, resource_id: str) -> None:
        """Detach a label from a resource.

        Raises:
            NotFound: If the label is not attached to the resource.
        """
        result = await self.db.execute(
            delete(LabelMapping).where(
                LabelMapping.label_id == label_id,
                LabelMapping.resource_id == resource_id,
            )
        )
        if result.rowcount == 0:
            raise NotFound(f"Label {label_id} is not attached to {resource_id}")
        await self.db.flush()

    async def delete_resource_label_mappings(self, resource_id: str) -> None:
        """Detach every label from a resource, inside a savepoint."""
        async with self.db.begin_nested():
            result = await self.db.execute(
                delete(LabelMapping).where(LabelMapping.resource_id == resource_id)
            )
        logger.debug(
            "Removed %d label mapping(s) for resource '%s'", result.rowcount, resource_id
        )
