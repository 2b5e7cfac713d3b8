"""Shared FastAPI dependencies for database sessions, the requesting user, and services."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from notifyhub.services.endpoint_service import EndpointService
from notifyhub.services.endpoint_store import SqlEndpointStore
from notifyhub.services.label_service import LabelService
from notifyhub.services.ownership_service import OwnershipService
from notifyhub.services.secret_service import SecretService


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session scoped to one request.

    The session factory is stored on ``request.app.state.session_factory``
    by the application lifespan. Services only flush; the request's writes
    are committed together once the handler returns, and rolled back if it
    raises.
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        else:
            await session.commit()


async def get_user_id(
    x_user_id: str | None = Header(default=None, alias="X-User-ID"),
) -> str | None:
    """Return the requesting user's identifier, if the caller sent one."""
    return x_user_id or None


async def get_endpoint_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> EndpointService:
    """Provide an EndpointService wired to SQLAlchemy-backed collaborators.

    Identifier and clock sources come from app state so they can be
    swapped for deterministic ones.
    """
    return EndpointService(
        store=SqlEndpointStore(db),
        secrets=SecretService(db),
        labels=LabelService(db),
        ownership=OwnershipService(db),
        id_generator=request.app.state.id_generator,
        clock=request.app.state.clock,
    )
