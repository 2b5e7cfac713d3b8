"""Update commands for notification endpoints.

Both update modes are plain command objects applied to the *currently
stored* endpoint:

* :class:`FullReplace` substitutes the caller's complete payload while
  keeping identity, ownership and creation time from the stored endpoint.
* :class:`ChangeSet` copies the stored endpoint and overwrites only the
  base fields the caller supplied.

:func:`apply_update` is the single dispatch point; the service layer and
HTTP handlers never need to know which mode was requested.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from notifyhub.errors import InvalidRequest
from notifyhub.notification.endpoint import NotificationEndpoint, check_name, check_status


@dataclass(frozen=True)
class FullReplace:
    """Replace every field of the stored endpoint with ``endpoint``.

    Variant fields missing from ``endpoint`` end up at their zero value.
    A secret is kept only when the caller echoed its ``"secret: ..."``
    reference back; an empty or omitted secret is cleared. An empty status
    keeps the stored status.
    """

    endpoint: NotificationEndpoint

    def apply(
        self, updated_at: datetime, current: NotificationEndpoint
    ) -> NotificationEndpoint:
        endpoint = self.endpoint.model_copy(deep=True)
        base = endpoint.base
        base.id = current.base.id
        base.org_id = current.base.org_id
        base.created_at = current.base.created_at
        base.updated_at = updated_at
        if not base.status:
            base.status = current.base.status

        for spec in endpoint.secret_specs:
            field = getattr(endpoint, spec.attr)
            if not (field.value or field.retain):
                field.key = ""
                continue
            previous = current.secret_by_wire_name(spec.wire_name)
            field.key = previous.key if previous is not None else ""
            if field.retain and not field.key:
                # Nothing stored under this name to keep.
                field.retain = False
        return endpoint


class ChangeSet(BaseModel):
    """Partial update of base fields; ``None`` means "leave unchanged"."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    description: str | None = None
    status: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> ChangeSet:
        """Parse and check a PATCH body.

        Raises:
            InvalidRequest: If the body is not an object or a field has the
                wrong type.
            InvalidConfig: If ``name`` is empty or too long, or ``status``
                is unknown.
        """
        try:
            change_set = cls.model_validate(payload)
        except ValidationError as exc:
            raise InvalidRequest(f"Invalid change set: {exc.error_count()} error(s)") from exc
        change_set.check()
        return change_set

    def check(self) -> None:
        if self.name is not None:
            check_name(self.name)
        if self.status is not None:
            check_status(self.status)

    def apply(
        self, updated_at: datetime, current: NotificationEndpoint
    ) -> NotificationEndpoint:
        endpoint = current.model_copy(deep=True)
        for field, value in self.model_dump(exclude_none=True).items():
            setattr(endpoint.base, field, value)
        endpoint.base.updated_at = updated_at
        return endpoint


EndpointUpdate = Union[FullReplace, ChangeSet]


def apply_update(
    update: EndpointUpdate, updated_at: datetime, current: NotificationEndpoint
) -> NotificationEndpoint:
    """Apply an update command to the stored endpoint and return the new version.

    Raises:
        InvalidRequest: If ``update`` is not a known update command.
    """
    if isinstance(update, (FullReplace, ChangeSet)):
        return update.apply(updated_at, current)
    raise InvalidRequest(f"Unsupported update mode: {type(update).__name__}")
