from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from notifyhub.models.base import ID_LENGTH, AuditMixin, Base, IDPrimaryKeyMixin
from notifyhub.notification.endpoint import NAME_MAX_LENGTH


class EndpointRecord(Base, IDPrimaryKeyMixin, AuditMixin):
    """Persisted notification endpoint.

    Base fields live in columns; the variant-specific configuration
    (including secret keys, never secret values) is a JSON document in
    ``config``.
    """

    __tablename__ = "notification_endpoints"
    __table_args__ = (
        UniqueConstraint("org_id", "name", name="uq_notification_endpoint_org_name"),
    )

    org_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, server_default="", nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), server_default="active", nullable=False
    )
    endpoint_type: Mapped[str] = mapped_column(String(50), nullable=False)
    config: Mapped[str] = mapped_column(Text, nullable=False)
