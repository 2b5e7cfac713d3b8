from notifyhub.notification.codec import (
    ENDPOINT_TYPES,
    decode,
    decode_record,
    encode,
    encode_record,
)
from notifyhub.notification.endpoint import (
    STATUS_ACTIVE,
    STATUS_INACTIVE,
    EndpointBase,
    NotificationEndpoint,
    SecretField,
    SecretSpec,
)
from notifyhub.notification.http import HTTPEndpoint
from notifyhub.notification.pagerduty import PagerDutyEndpoint
from notifyhub.notification.slack import SlackEndpoint
from notifyhub.notification.update import ChangeSet, EndpointUpdate, FullReplace, apply_update

__all__ = [
    "ENDPOINT_TYPES",
    "STATUS_ACTIVE",
    "STATUS_INACTIVE",
    "ChangeSet",
    "EndpointBase",
    "EndpointUpdate",
    "FullReplace",
    "HTTPEndpoint",
    "NotificationEndpoint",
    "PagerDutyEndpoint",
    "SecretField",
    "SecretSpec",
    "SlackEndpoint",
    "apply_update",
    "decode",
    "decode_record",
    "encode",
    "encode_record",
]
