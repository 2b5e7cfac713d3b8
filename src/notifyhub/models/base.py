from datetime import datetime
from secrets import token_hex

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ID_LENGTH = 16


def new_id() -> str:
    """Return a new 16-character lowercase hex identifier."""
    return token_hex(ID_LENGTH // 2)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


class IDPrimaryKeyMixin:
    """Mixin providing a 16-hex-character string primary key column."""

    id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        primary_key=True,
        default=new_id,
    )


class AuditMixin:
    """Mixin providing created_at and updated_at audit columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
