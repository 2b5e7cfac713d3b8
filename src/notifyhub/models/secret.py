from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from notifyhub.models.base import AuditMixin, Base, IDPrimaryKeyMixin


class Secret(Base, IDPrimaryKeyMixin, AuditMixin):
    """Key-value secret storage for endpoint credentials."""

    __tablename__ = "secrets"

    key: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
