"""Collaborator contracts consumed by :class:`EndpointService`.

The service only depends on these protocols. The default implementations
are SQLAlchemy-backed (see the sibling ``*_service`` and ``endpoint_store``
modules); tests swap in in-memory fakes.

Stores must serialize concurrent updates of the same endpoint: a
``get(..., for_update=True)`` followed by ``put`` of the same id runs as one
atomic step per identifier.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from notifyhub.notification.endpoint import NotificationEndpoint
from notifyhub.schemas.endpoint import EndpointFilter, LabelAttributes
from notifyhub.schemas.pagination import PaginationMeta


class EndpointStore(Protocol):
    async def get(
        self, endpoint_id: str, *, for_update: bool = False
    ) -> NotificationEndpoint: ...

    async def put(self, endpoint: NotificationEndpoint) -> None: ...

    async def delete(self, endpoint_id: str) -> None: ...

    async def find(
        self,
        filter: EndpointFilter,
        page_size: int = 20,
        after: str | None = None,
    ) -> tuple[list[NotificationEndpoint], PaginationMeta]: ...


class SecretStore(Protocol):
    async def put_secret(self, key: str, value: str) -> None: ...

    async def get_secret(self, key: str) -> str | None: ...

    async def delete_secret(self, key: str) -> None: ...


class LabelStore(Protocol):
    async def find_label_by_id(self, label_id: str) -> LabelAttributes | None: ...

    async def find_resource_labels(self, resource_id: str) -> list[LabelAttributes]: ...

    async def create_label_mapping(
        self, label_id: str, resource_id: str, resource_type: str
    ) -> None: ...

    async def delete_label_mapping(self, label_id: str, resource_id: str) -> None: ...

    async def delete_resource_label_mappings(self, resource_id: str) -> None: ...


class OwnershipStore(Protocol):
    async def create_owner_mapping(
        self, resource_id: str, resource_type: str, user_id: str
    ) -> None: ...

    async def find_resource_ids_for_user(
        self, user_id: str, resource_type: str
    ) -> list[str]: ...

    async def delete_resource_mappings(self, resource_id: str) -> None: ...


class IDGenerator(Protocol):
    def generate(self) -> str: ...


class Clock(Protocol):
    def now(self) -> datetime: ...
