"""SQLAlchemy-backed persistence for notification endpoints.

Implements the ``EndpointStore`` contract on top of the
``notification_endpoints`` table. All writes are flushed into the
request's unit of work; the session dependency commits once the request
succeeds. ``get(..., for_update=True)`` takes a row lock so that an update's
load, mutate and persist steps run atomically per endpoint.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notifyhub.errors import Conflict, NotFound
from notifyhub.models.endpoint import EndpointRecord
from notifyhub.notification.codec import decode_record, encode_record
from notifyhub.notification.endpoint import EndpointBase, NotificationEndpoint
from notifyhub.schemas.endpoint import EndpointFilter
from notifyhub.schemas.pagination import PaginationMeta, decode_cursor

logger = logging.getLogger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    # Some backends (SQLite) hand back naive datetimes.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_endpoint(record: EndpointRecord) -> NotificationEndpoint:
    base = EndpointBase(
        id=record.id,
        org_id=record.org_id,
        name=record.name,
        description=record.description,
        status=record.status,
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
    )
    return decode_record(record.endpoint_type, base, json.loads(record.config))


class SqlEndpointStore:
    """Endpoint persistence over an async SQLAlchemy session.

    Args:
        db: Async SQLAlchemy session for database operations.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_record(
        self, endpoint_id: str, for_update: bool = False
    ) -> EndpointRecord | None:
        query = select(EndpointRecord).where(EndpointRecord.id == endpoint_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get(
        self, endpoint_id: str, *, for_update: bool = False
    ) -> NotificationEndpoint:
        """Load an endpoint by id.

        Raises:
            NotFound: If no endpoint has this id.
        """
        record = await self._get_record(endpoint_id, for_update=for_update)
        if record is None:
            raise NotFound(f"Notification endpoint not found: {endpoint_id}")
        return _to_endpoint(record)

    async def _check_name_available(self, endpoint: NotificationEndpoint) -> None:
        base = endpoint.base
        result = await self.db.execute(
            select(EndpointRecord.id).where(
                EndpointRecord.org_id == base.org_id,
                EndpointRecord.name == base.name,
                EndpointRecord.id != base.id,
            )
        )
        if result.first() is not None:
            raise Conflict(
                f"Notification endpoint named '{base.name}' already exists "
                f"in organization {base.org_id}"
            )

    async def put(self, endpoint: NotificationEndpoint) -> None:
        """Insert or update an endpoint.

        Raises:
            Conflict: If another endpoint in the organization has the same name.
        """
        await self._check_name_available(endpoint)

        base = endpoint.base
        try:
            # Concurrent writers can still race past the name check.
            async with self.db.begin_nested():
                record = await self._get_record(base.id)
                if record is None:
                    record = EndpointRecord(id=base.id)
                    self.db.add(record)
                    logger.debug("Inserting notification endpoint '%s'", base.id)

                record.org_id = base.org_id
                record.name = base.name
                record.description = base.description
                record.status = base.status
                record.endpoint_type = endpoint.endpoint_type
                record.config = json.dumps(encode_record(endpoint))
                if base.created_at is not None:
                    record.created_at = base.created_at
                if base.updated_at is not None:
                    record.updated_at = base.updated_at
        except IntegrityError as exc:
            raise Conflict(
                f"Notification endpoint named '{base.name}' already exists "
                f"in organization {base.org_id}"
            ) from exc

    async def delete(self, endpoint_id: str) -> None:
        """Hard-delete an endpoint.

        Raises:
            NotFound: If no endpoint has this id.
        """
        record = await self._get_record(endpoint_id)
        if record is None:
            raise NotFound(f"Notification endpoint not found: {endpoint_id}")

        await self.db.delete(record)
        await self.db.flush()

    async def find(
        self,
        filter: EndpointFilter,
        page_size: int = 20,
        after: str | None = None,
    ) -> tuple[list[NotificationEndpoint], PaginationMeta]:
        """List endpoints with cursor-based pagination.

        Args:
            filter: Organization, type and resource-id restrictions.
            page_size: Maximum number of endpoints to return.
            after: Opaque cursor for pagination.

        Returns:
            Tuple of (endpoints list, pagination metadata).
        """
        query = select(EndpointRecord)

        if filter.org_id:
            query = query.where(EndpointRecord.org_id == filter.org_id)
        if filter.endpoint_type:
            query = query.where(EndpointRecord.endpoint_type == filter.endpoint_type)
        if filter.resource_ids is not None:
            query = query.where(EndpointRecord.id.in_(filter.resource_ids))

        if after:
            cursor_created_at, cursor_id = decode_cursor(after)
            query = query.where(
                (EndpointRecord.created_at > cursor_created_at)
                | (
                    (EndpointRecord.created_at == cursor_created_at)
                    & (EndpointRecord.id > cursor_id)
                )
            )

        query = query.order_by(
            EndpointRecord.created_at.asc(), EndpointRecord.id.asc()
        )
        query = query.limit(page_size + 1)

        result = await self.db.execute(query)
        records = list(result.scalars().all())

        has_next = len(records) > page_size
        if has_next:
            records = records[:page_size]

        return [_to_endpoint(r) for r in records], PaginationMeta(
            has_next=has_next, has_prev=after is not None
        )
