from notifyhub.models.base import AuditMixin, Base, IDPrimaryKeyMixin
from notifyhub.models.endpoint import EndpointRecord
from notifyhub.models.label import Label, LabelMapping
from notifyhub.models.ownership import ResourceMapping
from notifyhub.models.secret import Secret

__all__ = [
    "Base",
    "IDPrimaryKeyMixin",
    "AuditMixin",
    "EndpointRecord",
    "Label",
    "LabelMapping",
    "ResourceMapping",
    "Secret",
]
