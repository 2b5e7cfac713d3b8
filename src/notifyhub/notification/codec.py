"""Polymorphic JSON codec for notification endpoints.

The wire shape is one flat object: base fields, the variant's public
fields, each secret under its public name, and a ``type`` discriminator.
Secrets are written as ``""`` (no key yet) or ``"secret: <key>"`` and are
never written as plaintext.

``ENDPOINT_TYPES`` is the only place concrete variants are enumerated;
everything else goes through the :class:`NotificationEndpoint` capability
methods.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from notifyhub.errors import InvalidConfig, UnknownType
from notifyhub.notification.endpoint import EndpointBase, NotificationEndpoint, SecretField
from notifyhub.notification.http import HTTPEndpoint
from notifyhub.notification.pagerduty import PagerDutyEndpoint
from notifyhub.notification.slack import SlackEndpoint

ENDPOINT_TYPES: dict[str, type[NotificationEndpoint]] = {
    SlackEndpoint.endpoint_type: SlackEndpoint,
    HTTPEndpoint.endpoint_type: HTTPEndpoint,
    PagerDutyEndpoint.endpoint_type: PagerDutyEndpoint,
}

SECRET_REFERENCE_PREFIX = "secret: "
TYPE_FIELD = "type"
BASE_WIRE_FIELDS = frozenset(
    field.alias or name for name, field in EndpointBase.model_fields.items()
)


def variant_for(endpoint_type: Any) -> type[NotificationEndpoint]:
    """Return the variant class registered for ``endpoint_type``.

    Raises:
        UnknownType: If the discriminator is missing or not registered.
    """
    if isinstance(endpoint_type, str) and endpoint_type in ENDPOINT_TYPES:
        return ENDPOINT_TYPES[endpoint_type]
    raise UnknownType(f"Unsupported notification endpoint type: {endpoint_type!r}")


def _public_fields(endpoint: NotificationEndpoint) -> dict[str, Any]:
    secret_attrs = {spec.attr for spec in endpoint.secret_specs}
    return endpoint.model_dump(
        mode="json", by_alias=True, exclude={"base", *secret_attrs}
    )


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


# ---------------------------------------------------------------------------
# Wire encoding
# ---------------------------------------------------------------------------


def encode(endpoint: NotificationEndpoint) -> dict[str, Any]:
    """Encode an endpoint into its wire object.

    Secret keys are backfilled first so a freshly created endpoint already
    reports its secret references.
    """
    endpoint.backfill_secret_keys()

    payload = endpoint.base.model_dump(mode="json", by_alias=True)
    payload.update(_public_fields(endpoint))
    for spec in endpoint.secret_specs:
        field = getattr(endpoint, spec.attr)
        payload[spec.wire_name] = (
            f"{SECRET_REFERENCE_PREFIX}{field.key}" if field.key else ""
        )
    payload[TYPE_FIELD] = endpoint.endpoint_type
    return payload


def load_object(data: bytes | str | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(data, Mapping):
        return dict(data)
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidConfig(f"Notification endpoint body is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise InvalidConfig("Notification endpoint body must be a JSON object")
    return payload


def _decode_secret(wire_name: str, value: Any) -> SecretField:
    if value is None or value == "":
        return SecretField()
    if not isinstance(value, str):
        raise InvalidConfig(f"{wire_name}: secret value must be a string")
    if value.startswith(SECRET_REFERENCE_PREFIX):
        return SecretField(retain=True)
    return SecretField(value=value)


def decode(data: bytes | str | Mapping[str, Any]) -> NotificationEndpoint:
    """Decode a wire object into the variant named by its ``type`` field.

    Missing fields decode to zero values and unknown fields are ignored.
    Secret keys are never read from the wire; they are derived later by
    :meth:`NotificationEndpoint.backfill_secret_keys`.

    Raises:
        UnknownType: If ``type`` is missing or unrecognized.
        InvalidConfig: If the body is not a JSON object or a field has the
            wrong type.
    """
    payload = load_object(data)
    cls = variant_for(payload.get(TYPE_FIELD))

    secret_names = {spec.wire_name for spec in cls.secret_specs}
    base_fields = {k: v for k, v in payload.items() if k in BASE_WIRE_FIELDS}
    fields = {
        k: v
        for k, v in payload.items()
        if k not in BASE_WIRE_FIELDS and k not in secret_names and k != TYPE_FIELD
    }
    secrets = {
        spec.attr: _decode_secret(spec.wire_name, payload.get(spec.wire_name))
        for spec in cls.secret_specs
    }

    try:
        base = EndpointBase.model_validate(base_fields)
        return cls.model_validate({**fields, "base": base, **secrets})
    except ValidationError as exc:
        raise InvalidConfig(_validation_message(exc)) from exc


# ---------------------------------------------------------------------------
# Storage encoding
# ---------------------------------------------------------------------------


def encode_record(endpoint: NotificationEndpoint) -> dict[str, Any]:
    """Encode the variant-specific configuration for persistence.

    Base fields are stored in their own columns. Secrets are stored as
    ``{"key": ...}`` references; values are never persisted here.
    """
    config = _public_fields(endpoint)
    for spec in endpoint.secret_specs:
        key = getattr(endpoint, spec.attr).key
        if key:
            config[spec.wire_name] = {"key": key}
    return config


def decode_record(
    endpoint_type: str, base: EndpointBase, config: Mapping[str, Any]
) -> NotificationEndpoint:
    """Rebuild a stored endpoint from its type, base fields and config."""
    cls = variant_for(endpoint_type)
    fields = dict(config)
    secrets = {}
    for spec in cls.secret_specs:
        stored = fields.pop(spec.wire_name, None)
        if isinstance(stored, Mapping) and stored.get("key"):
            secrets[spec.attr] = SecretField(key=stored["key"])
        else:
            secrets[spec.attr] = SecretField()
    return cls.model_validate({**fields, "base": base, **secrets})
