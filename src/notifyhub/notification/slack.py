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


class SlackEndpoint(NotificationEndpoint):
    """Slack incoming-webhook endpoint.

    ``url`` is the webhook URL (e.g. https://hooks.slack.com/services/...);
    ``token`` is an optional bearer token for the chat.postMessage API.
    """

    endpoint_type: ClassVar[str] = "slack"
    secret_specs: ClassVar[tuple[SecretSpec, ...]] = (
        SecretSpec("token", "token", "-token"),
    )

    url: NullableStr = ""
    token: SecretField = Field(default_factory=SecretField)

    def _validate_variant(self) -> None:
        if not self.url:
            raise InvalidConfig("slack endpoint URL must be provided")
        validate_url(self.url, self.endpoint_type)
