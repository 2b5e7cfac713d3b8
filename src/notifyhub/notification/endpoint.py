"""Shared shape of every notification endpoint variant.

A variant is a pydantic model holding an :class:`EndpointBase` plus its own
public fields and a static table of secret fields. Update and codec code
only ever touch variants through the capability methods defined on
:class:`NotificationEndpoint`.
"""

from datetime import datetime
from typing import Annotated, Any, ClassVar, NamedTuple

import httpx
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from notifyhub.errors import InvalidConfig

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
VALID_STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE)
NAME_MAX_LENGTH = 100


def none_as_empty(value: Any) -> Any:
    """Treat JSON ``null`` as the zero value of a string field."""
    return "" if value is None else value


NullableStr = Annotated[str, BeforeValidator(none_as_empty)]


def check_name(name: str) -> None:
    """Raise InvalidConfig unless ``name`` is non-empty and fits the name column."""
    if not name:
        raise InvalidConfig("Notification endpoint name must be provided")
    if len(name) > NAME_MAX_LENGTH:
        raise InvalidConfig(
            f"Notification endpoint name must be at most {NAME_MAX_LENGTH} characters"
        )


def check_status(status: str) -> None:
    if status not in VALID_STATUSES:
        raise InvalidConfig(
            f"Invalid status '{status}', expected one of: " + ", ".join(VALID_STATUSES)
        )


class SecretSpec(NamedTuple):
    """One row of a variant's secret table."""

    attr: str
    wire_name: str
    suffix: str


class SecretField(BaseModel):
    """Reference to a secret stored outside the endpoint.

    ``value`` only lives on the object between decoding a request and
    writing it to the secret store. ``retain`` marks a redacted reference
    the client echoed back, meaning "keep whatever is stored".
    """

    key: str = ""
    value: str | None = None
    retain: bool = False

    def is_set(self) -> bool:
        return bool(self.key or self.value or self.retain)


class EndpointBase(BaseModel):
    """Fields shared by every endpoint variant."""

    model_config = ConfigDict(populate_by_name=True)

    id: NullableStr = ""
    org_id: NullableStr = Field(default="", alias="orgID")
    name: NullableStr = ""
    description: NullableStr = ""
    status: NullableStr = ""
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    def validate_base(self) -> None:
        check_name(self.name)
        check_status(self.status)
        if not self.org_id:
            raise InvalidConfig("Notification endpoint orgID must be provided")


def validate_url(url: str, endpoint_type: str, label: str = "URL") -> None:
    """Raise InvalidConfig if ``url`` does not parse."""
    try:
        httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidConfig(f"{endpoint_type} endpoint {label} is invalid: {exc}") from exc


class NotificationEndpoint(BaseModel):
    """Capability set shared by all endpoint variants.

    Subclasses set ``endpoint_type`` and ``secret_specs`` and implement
    :meth:`_validate_variant`.
    """

    model_config = ConfigDict(populate_by_name=True)

    endpoint_type: ClassVar[str] = ""
    secret_specs: ClassVar[tuple[SecretSpec, ...]] = ()

    base: EndpointBase = Field(default_factory=EndpointBase)

    def validate_config(self) -> None:
        """Validate base and variant fields, raising InvalidConfig on failure."""
        self.base.validate_base()
        self._validate_variant()

    def _validate_variant(self) -> None:
        raise NotImplementedError

    def secret_fields(self) -> list[SecretField]:
        """Return the secret fields that currently hold a key, in table order."""
        fields = []
        for spec in self.secret_specs:
            field = getattr(self, spec.attr)
            if field.key:
                fields.append(field)
        return fields

    def backfill_secret_keys(self) -> None:
        """Derive ``<id><suffix>`` keys for secrets that have a value but no key.

        Needs an assigned identifier; until then this is a no-op. Keys that
        are already set are never overwritten.
        """
        if not self.base.id:
            return
        for spec in self.secret_specs:
            field = getattr(self, spec.attr)
            if not field.key and (field.value or field.retain):
                field.key = f"{self.base.id}{spec.suffix}"

    def secret_by_wire_name(self, wire_name: str) -> SecretField | None:
        for spec in self.secret_specs:
            if spec.wire_name == wire_name:
                return getattr(self, spec.attr)
        return None

    def pending_secrets(self) -> list[tuple[str, str]]:
        """Return ``(key, value)`` pairs that still need writing to the secret store."""
        return [
            (field.key, field.value)
            for field in self.secret_fields()
            if field.value
        ]

    def drop_retained_references(self) -> None:
        """Forget echoed ``"secret: ..."`` references that have no stored key."""
        for spec in self.secret_specs:
            field = getattr(self, spec.attr)
            if field.retain and not field.key:
                field.retain = False

    def clear_secret_values(self) -> None:
        for spec in self.secret_specs:
            field = getattr(self, spec.attr)
            field.value = None
            field.retain = False
