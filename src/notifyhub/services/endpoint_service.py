"""Notification endpoint service layer.

Composes the variant model, the update commands and the collaborator
stores into create, find, update and delete operations. Nothing here
branches on the concrete endpoint variant.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from notifyhub.errors import NotFound
from notifyhub.notification.endpoint import STATUS_ACTIVE, NotificationEndpoint
from notifyhub.notification.update import EndpointUpdate, apply_update
from notifyhub.schemas.endpoint import RESOURCE_TYPE, EndpointFilter, LabelAttributes
from notifyhub.schemas.pagination import PaginationMeta
from notifyhub.services.generators import RandomIDGenerator, SystemClock
from notifyhub.services.ports import (
    Clock,
    EndpointStore,
    IDGenerator,
    LabelStore,
    OwnershipStore,
    SecretStore,
)

logger = logging.getLogger(__name__)


class EndpointService:
    """Service for notification endpoint CRUD, updates and label attachment.

    Args:
        store: Endpoint persistence.
        secrets: Secret store receiving secret values.
        labels: Label lookups and mappings.
        ownership: User/resource mappings.
        id_generator: Source of new endpoint identifiers.
        clock: Source of creation and update timestamps.
    """

    def __init__(
        self,
        store: EndpointStore,
        secrets: SecretStore,
        labels: LabelStore,
        ownership: OwnershipStore,
        id_generator: IDGenerator | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.store = store
        self.secrets = secrets
        self.labels = labels
        self.ownership = ownership
        self.id_generator = id_generator or RandomIDGenerator()
        self.clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Secrets
    # ------------------------------------------------------------------

    async def _write_secrets(self, endpoint: NotificationEndpoint) -> None:
        for key, value in endpoint.pending_secrets():
            await self.secrets.put_secret(key, value)
        endpoint.clear_secret_values()

    async def _release_secrets(self, endpoint_id: str, keys: Iterable[str]) -> None:
        for key in keys:
            try:
                await self.secrets.delete_secret(key)
            except Exception:
                logger.exception(
                    "Failed to release secret '%s' of notification endpoint '%s'",
                    key,
                    endpoint_id,
                )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def create(
        self, endpoint: NotificationEndpoint, user_id: str | None = None
    ) -> NotificationEndpoint:
        """Create a new endpoint.

        Assigns a fresh identifier and timestamps, defaults the status to
        ``active``, derives secret keys, validates, writes secret values to
        the secret store and persists the endpoint. When ``user_id`` is
        given the user is recorded as the endpoint's owner.

        Args:
            endpoint: Decoded endpoint payload.
            user_id: Optional identifier of the requesting user.

        Returns:
            The created endpoint, with secret values cleared.

        Raises:
            InvalidConfig: If the endpoint fails validation.
            Conflict: If the name is already used in the organization.
        """
        base = endpoint.base
        base.id = self.id_generator.generate()
        if not base.status:
            base.status = STATUS_ACTIVE
        now = self.clock.now()
        base.created_at = now
        base.updated_at = now

        endpoint.drop_retained_references()
        endpoint.backfill_secret_keys()
        endpoint.validate_config()

        await self._write_secrets(endpoint)
        await self.store.put(endpoint)
        if user_id:
            await self.ownership.create_owner_mapping(base.id, RESOURCE_TYPE, user_id)

        logger.info(
            "Created %s notification endpoint '%s' (%s) in org %s",
            endpoint.endpoint_type,
            base.name,
            base.id,
            base.org_id,
        )
        return endpoint

    async def find(
        self,
        filter: EndpointFilter,
        page_size: int = 20,
        after: str | None = None,
    ) -> tuple[list[NotificationEndpoint], PaginationMeta]:
        """List endpoints matching ``filter`` with cursor-based pagination.

        A ``user_id`` filter restricts the result to endpoints the user has
        a mapping for.
        """
        if filter.user_id:
            resource_ids = await self.ownership.find_resource_ids_for_user(
                filter.user_id, RESOURCE_TYPE
            )
            filter = filter.model_copy(update={"resource_ids": resource_ids})
        return await self.store.find(filter, page_size=page_size, after=after)

    async def find_by_id(self, endpoint_id: str) -> NotificationEndpoint:
        """Get an endpoint by id.

        Raises:
            NotFound: If the endpoint does not exist.
        """
        return await self.store.get(endpoint_id)

    async def update(
        self, endpoint_id: str, update: EndpointUpdate
    ) -> NotificationEndpoint:
        """Apply a full replace or a change set to a stored endpoint.

        The stored endpoint is loaded with a row lock, the update command is
        applied to it, and the result is validated before anything is
        written. Secret keys the previous version held but the new one does
        not are released afterwards.

        Raises:
            NotFound: If the endpoint does not exist.
            InvalidRequest: If ``update`` is not a known update command.
            InvalidConfig: If the updated endpoint fails validation.
            Conflict: If the new name is already used in the organization.
        """
        current = await self.store.get(endpoint_id, for_update=True)
        previous_keys = [field.key for field in current.secret_fields()]

        endpoint = apply_update(update, self.clock.now(), current)
        endpoint.backfill_secret_keys()
        endpoint.validate_config()

        await self._write_secrets(endpoint)
        await self.store.put(endpoint)

        kept = {field.key for field in endpoint.secret_fields()}
        await self._release_secrets(
            endpoint_id, [key for key in previous_keys if key not in kept]
        )

        logger.info(
            "Updated notification endpoint '%s' (%s)",
            endpoint.base.id,
            type(update).__name__,
        )
        return endpoint

    async def delete(self, endpoint_id: str) -> None:
        """Delete an endpoint and clean up what hangs off it.

        Secret keys, label mappings and ownership mappings are removed on
        a best-effort basis: failures are logged and the delete stands.

        Raises:
            NotFound: If the endpoint does not exist.
        """
        endpoint = await self.store.get(endpoint_id)
        await self.store.delete(endpoint_id)

        await self._release_secrets(
            endpoint_id, [field.key for field in endpoint.secret_fields()]
        )
        try:
            await self.labels.delete_resource_label_mappings(endpoint_id)
        except Exception:
            logger.exception(
                "Failed to remove label mappings of notification endpoint '%s'",
                endpoint_id,
            )
        try:
            await self.ownership.delete_resource_mappings(endpoint_id)
        except Exception:
            logger.exception(
                "Failed to remove ownership mappings of notification endpoint '%s'",
                endpoint_id,
            )

        logger.info("Deleted notification endpoint '%s'", endpoint_id)

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    async def attach_labels(
        self, endpoint_id: str, label_ids: Iterable[str]
    ) -> list[LabelAttributes]:
        """Attach labels to a freshly created endpoint, skipping failures.

        Returns:
            The labels that were attached.
        """
        attached = []
        for label_id in label_ids:
            try:
                label = await self.labels.find_label_by_id(label_id)
                if label is None:
                    logger.warning(
                        "Skipping unknown label '%s' for notification endpoint '%s'",
                        label_id,
                        endpoint_id,
                    )
                    continue
                await self.labels.create_label_mapping(
                    label.id, endpoint_id, RESOURCE_TYPE
                )
            except Exception:
                logger.exception(
                    "Failed to attach label '%s' to notification endpoint '%s'",
                    label_id,
                    endpoint_id,
                )
                continue
            attached.append(label)
        return attached

    async def resource_labels(self, endpoint_id: str) -> list[LabelAttributes]:
        return await self.labels.find_resource_labels(endpoint_id)

    async def labels_for(self, endpoint_id: str) -> list[LabelAttributes]:
        """List labels of an existing endpoint.

        Raises:
            NotFound: If the endpoint does not exist.
        """
        await self.store.get(endpoint_id)
        return await self.labels.find_resource_labels(endpoint_id)

    async def add_label(self, endpoint_id: str, label_id: str) -> LabelAttributes:
        """Attach one label to an existing endpoint.

        Raises:
            NotFound: If the endpoint or the label does not exist.
        """
        await self.store.get(endpoint_id)
        label = await self.labels.find_label_by_id(label_id)
        if label is None:
            raise NotFound(f"Label not found: {label_id}")
        await self.labels.create_label_mapping(label.id, endpoint_id, RESOURCE_TYPE)
        return label

    async def remove_label(self, endpoint_id: str, label_id: str) -> None:
        """Detach one label from an existing endpoint.

        Raises:
            NotFound: If the endpoint does not exist or the label is not attached.
        """
        await self.store.get(endpoint_id)
        await self.labels.delete_label_mapping(label_id, endpoint_id)
