"""
Route aggregator — mounts all routers under /api/v1 prefix.

Health is exported separately for main.py to mount at root.
Version: 1.0.0
"""
from fastapi import APIRouter

from catalog_hub.routes.catalog import router as catalog_router
from catalog_hub.routes.listings import router as listings_router
from catalog_hub.routes.expenses import router as expenses_router
from catalog_hub.routes.health import router as health_router

v1_router = APIRouter(prefix="/api/v1")

v1_router.include_router(catalog_router)
v1_router.include_router(listings_router)
v1_router.include_router(expenses_router)

__all__ = ["v1_router", "health_router"]
