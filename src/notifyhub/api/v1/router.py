"""V1 API router aggregating all sub-routers."""

from fastapi import APIRouter

from notifyhub.api.v1.endpoints.router import COLLECTION_PATH
from notifyhub.api.v1.endpoints.router import router as endpoints_router
from notifyhub.api.v1.system.router import router as system_router

v1_router = APIRouter()
v1_router.include_router(system_router, prefix="/system", tags=["system"])
v1_router.include_router(
    endpoints_router, prefix=COLLECTION_PATH, tags=["notification-endpoints"]
)
