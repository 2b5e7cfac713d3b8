"""System router providing health check and operational endpoints."""

import logging

from fastapi import APIRouter, Request
from sqlalchemy import text

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """Return system health status including database connectivity.

    The overall status is ``healthy`` when the database answers and
    ``degraded`` otherwise; the route itself always responds 200.
    """
    db_ok = False
    try:
        session_factory = request.app.state.session_factory
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        db_ok = True
    except Exception:
        logger.warning("Database health check failed", exc_info=True)

    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
    }
