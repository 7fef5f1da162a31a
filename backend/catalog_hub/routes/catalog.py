"""
Catalog routes — stored hierarchy, live snapshot, sync preview and commit.

Provides:
- GET  /catalog/products       – stored catalog as product nodes
- GET  /catalog/live           – live storefront variants
- GET  /catalog/sync/preview   – stored vs live diff
- POST /catalog/commit         – persist edits, deletions, accepted diffs
- GET  /catalog/weights        – weight differences
- POST /catalog/weights        – apply weight differences
Version: 1.0.0
"""
import logging
from typing import List

from fastapi import APIRouter, Body, Depends

from catalog_hub.container import get_catalog_service
from catalog_hub.schemas.catalog import ProductNode, SyncPreview, Variant, WeightSyncPreview, WeightSyncResult
from catalog_hub.schemas.commit import CommitReport, CommitRequest
from catalog_hub.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/products", response_model=List[ProductNode])
async def list_products(service: CatalogService = Depends(get_catalog_service)):
    return await service.get_hierarchy()


@router.get("/live", response_model=List[Variant])
async def list_live_variants(service: CatalogService = Depends(get_catalog_service)):
    return await service.fetch_live()


@router.get("/sync/preview", response_model=SyncPreview)
async def sync_preview(service: CatalogService = Depends(get_catalog_service)):
    return await service.preview_sync()


@router.post("/commit", response_model=CommitReport)
async def commit_changes(
    payload: CommitRequest = Body(...),
    service: CatalogService = Depends(get_catalog_service),
):
    """Persist staged edits, then deletions, then accepted live values."""
    report = await service.commit(payload)
    if report.failed:
        logger.warning("commit partially failed failed=%d succeeded=%d", report.failed, report.succeeded)
    return report


@router.get("/weights", response_model=WeightSyncPreview)
async def weight_preview(service: CatalogService = Depends(get_catalog_service)):
    return await service.preview_weights()


@router.post("/weights", response_model=WeightSyncResult)
async def apply_weights(service: CatalogService = Depends(get_catalog_service)):
    return await service.apply_weights()
