from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from notifyhub.models.base import ID_LENGTH, AuditMixin, Base, IDPrimaryKeyMixin


class ResourceMapping(Base, IDPrimaryKeyMixin, AuditMixin):
    """Association between a user and a resource they own or are a member of."""

    __tablename__ = "resource_mappings"
    __table_args__ = (
        UniqueConstraint("resource_id", "user_id", name="uq_resource_mapping_resource_user"),
    )

    resource_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False, index=True)
    resource_type: Mapped[str] = mapped_column(String(50), nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    user_type: Mapped[str] = mapped_column(
        String(20), server_default="owner", nullable=False
    )
