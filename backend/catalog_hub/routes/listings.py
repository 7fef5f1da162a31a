"""
Listing routes — listing draft CRUD and publish.

Provides:
- GET    /listings                – all drafts, newest first
- POST   /listings                – create draft
- PATCH  /listings/{id}           – merge into draft_data
- DELETE /listings/{id}           – delete draft
- POST   /listings/{id}/publish   – create the product on Shopify
Version: 1.0.0
"""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from catalog_hub.container import get_listing_store, get_publishing_service
from catalog_hub.db.listing_store import ListingStore
from catalog_hub.core.exceptions import ValidationError
from catalog_hub.schemas.listings import DraftStatus, ListingDraft, PublishResult
from catalog_hub.services.publishing_service import PublishingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/listings", tags=["listings"])


@router.get("", response_model=List[ListingDraft])
async def list_listings(store: ListingStore = Depends(get_listing_store)):
    return await store.list_drafts()


@router.post("", response_model=ListingDraft)
async def create_listing(
    payload: Dict[str, Any] = Body(...),
    store: ListingStore = Depends(get_listing_store),
):
    return await store.create_draft(payload)


@router.patch("/{draft_id}", response_model=ListingDraft)
async def update_listing(
    draft_id: str,
    payload: Dict[str, Any] = Body(...),
    store: ListingStore = Depends(get_listing_store),
):
    """Top-level keys are merged into draft_data; "status" updates the status column."""
    changes = dict(payload)
    status = changes.pop("status", None)
    if status is not None and status not in {s.value for s in DraftStatus}:
        raise ValidationError(f"invalid status {status!r}")
    return await store.update_draft(draft_id, changes, status=DraftStatus(status) if status else None)


@router.delete("/{draft_id}")
async def delete_listing(draft_id: str, store: ListingStore = Depends(get_listing_store)):
    await store.delete_draft(draft_id)
    return {"success": True}


@router.post("/{draft_id}/publish", response_model=PublishResult)
async def publish_listing(
    draft_id: str,
    service: PublishingService = Depends(get_publishing_service),
):
    """Create the product as DRAFT on Shopify; follow-up step errors are reported, not raised."""
    result = await service.publish_draft(draft_id)
    if result.errors:
        logger.warning("publish completed with errors id=%s errors=%d", draft_id, len(result.errors))
    return result
