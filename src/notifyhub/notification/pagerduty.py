from typing import ClassVar

from pydantic import Field

from notifyhub.errors import InvalidConfig
from notifyhub.notification.endpoint import (
    NotificationEndpoint,
    NullableStr,
    SecretField,
    SecretSpec,
    validate_url,
)


class PagerDutyEndpoint(NotificationEndpoint):
    """PagerDuty Events API endpoint addressed by an integration routing key."""

    endpoint_type: ClassVar[str] = "pagerduty"
    secret_specs: ClassVar[tuple[SecretSpec, ...]] = (
        SecretSpec("routing_key", "routingKey", "-routing-key"),
    )

    client_url: NullableStr = Field(default="", alias="clientURL")
    routing_key: SecretField = Field(default_factory=SecretField)

    def _validate_variant(self) -> None:
        if not self.routing_key.is_set():
            raise InvalidConfig("pagerduty endpoint routingKey must be provided")
        if self.client_url:
            validate_url(self.client_url, self.endpoint_type, label="clientURL")
