from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from notifyhub.models.base import ID_LENGTH, AuditMixin, Base, IDPrimaryKeyMixin


class Label(Base, IDPrimaryKeyMixin, AuditMixin):
    """Organization-scoped label that can be attached to resources."""

    __tablename__ = "labels"

    org_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    properties: Mapped[str] = mapped_column(Text, server_default="{}", nullable=False)


class LabelMapping(Base, IDPrimaryKeyMixin, AuditMixin):
    """Association between a label and a labelled resource."""

    __tablename__ = "label_mappings"
    __table_args__ = (
        UniqueConstraint("label_id", "resource_id", name="uq_label_mapping_label_resource"),
    )

    label_id: Mapped[str] = mapped_column(
        String(ID_LENGTH), ForeignKey("labels.id"), nullable=False
    )
    resource_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False, index=True)
    resource_type: Mapped[str] = mapped_column(String(50), nullable=False)
