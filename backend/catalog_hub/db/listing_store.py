"""
Listing store — listing_drafts table.
Version: 1.0.0
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from catalog_hub.core.constants.catalog import LISTING_DRAFTS_TABLE
from catalog_hub.core.exceptions import DraftNotFoundError
from catalog_hub.db.base_store import BaseStore
from catalog_hub.schemas.listings import DraftStatus, ListingDraft
from catalog_hub.utils.type_converters import to_json_value

logger = logging.getLogger("listing_store")


def normalize_draft_data(body: Dict[str, Any]) -> Dict[str, Any]:
    """Fill defaults for a new draft and give every variant a local id."""
    data = dict(body)
    data.setdefault("title", "")
    data["price"] = data.get("price") or 0
    for key in ("compare_at_price", "cost", "weight"):
        data[key] = data.get(key) or None
    data["note"] = data.get("note") or ""
    data["purchase_link"] = data.get("purchase_link") or ""
    data["options"] = data.get("options") or []

    variants = []
    for variant in data.get("variants") or []:
        variant = dict(variant)
        if not variant.get("id"):
            variant["id"] = str(uuid.uuid4())
        variants.append(variant)
    data["variants"] = variants
    return data


class ListingStore(BaseStore):
    """CRUD for listing drafts."""

    async def list_drafts(self) -> List[ListingDraft]:
        rows = await self._select(LISTING_DRAFTS_TABLE, order="created_at", desc=True)
        return [ListingDraft.from_row(row) for row in rows]

    async def get_draft(self, draft_id: str) -> ListingDraft:
        rows = await self._select(LISTING_DRAFTS_TABLE, filters={"id": draft_id})
        if not rows:
            raise DraftNotFoundError(draft_id)
        return ListingDraft.from_row(rows[0])

    async def create_draft(self, body: Dict[str, Any]) -> ListingDraft:
        payload = {
            "product_id": None,
            "draft_data": to_json_value(normalize_draft_data(body)),
            "status": DraftStatus.DRAFT.value,
        }
        rows = await self._insert(LISTING_DRAFTS_TABLE, [payload])
        draft = ListingDraft.from_row(rows[0])
        logger.info("listing draft created id=%s variants=%d", draft.id, len(draft.draft_data.variants))
        return draft

    async def update_draft(
        self, draft_id: str, changes: Dict[str, Any], status: Optional[DraftStatus] = None
    ) -> ListingDraft:
        """Shallow-merge changes into draft_data; status is a column, not a blob key."""
        rows = await self._select(LISTING_DRAFTS_TABLE, columns="draft_data", filters={"id": draft_id})
        if not rows:
            raise DraftNotFoundError(draft_id)

        payload: Dict[str, Any] = {
            "draft_data": {**(rows[0].get("draft_data") or {}), **to_json_value(changes)},
        }
        if status is not None:
            payload["status"] = status.value
        updated = await self._update(LISTING_DRAFTS_TABLE, {"id": draft_id}, payload)
        if not updated:
            raise DraftNotFoundError(draft_id)
        return ListingDraft.from_row(updated[0])

    async def delete_draft(self, draft_id: str) -> None:
        deleted = await self._delete_in(LISTING_DRAFTS_TABLE, "id", [draft_id])
        if not deleted:
            raise DraftNotFoundError(draft_id)

    async def mark_pushed(self, draft_id: str, shopify_product_id: Optional[str]) -> None:
        """Rewrite only the push-state keys of the blob; everything else is kept."""
        await self.update_draft(draft_id, {"is_pushed": True, "shopify_product_id": shopify_product_id})
