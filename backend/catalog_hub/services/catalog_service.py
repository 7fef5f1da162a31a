"""
Catalog service — hierarchy, live snapshot, sync preview, commit, weight sync.

Wires the stores and the storefront client to the pure hierarchy / diff
functions and to the stage buffer + committer.
Version: 1.0.0
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from catalog_hub.clients.storefront_client import StorefrontClient
from catalog_hub.core.config import Settings
from catalog_hub.core.constants.catalog import (
    DELETE_PRODUCT_PREFIX,
    DELETE_VARIANT_PREFIX,
    STOREFRONT_PAGE_LIMIT,
)
from catalog_hub.core.exceptions import CatalogHubException, ValidationError
from catalog_hub.db.catalog_store import CatalogStore
from catalog_hub.schemas.catalog import (
    ProductNode,
    SyncPreview,
    Variant,
    WeightChange,
    WeightSyncPreview,
    WeightSyncResult,
)
from catalog_hub.schemas.commit import CommitReport, CommitRequest
from catalog_hub.services.reconciliation_service import ReconciliationService
from catalog_hub.services.stage_buffer import EditBuffer
from catalog_hub.utils.batch_grouping import run_in_chunks
from catalog_hub.utils.hierarchy import build_hierarchy
from catalog_hub.utils.snapshot_diff import diff_snapshots
from catalog_hub.utils.storefront_transform import transform_products
from catalog_hub.utils.type_converters import numbers_differ, to_decimal

logger = logging.getLogger("catalog_service")


def resolve_deletions(ids: Iterable[str], variants: List[Variant]) -> List[int]:
    """Expand "variant-<id>" / "spu-<product_id>" selections to variant ids."""
    by_product: Dict[int, List[int]] = {}
    for variant in variants:
        by_product.setdefault(variant.product_id, []).append(variant.variant_id)

    resolved: List[int] = []
    for raw in ids:
        if raw.startswith(DELETE_VARIANT_PREFIX):
            prefix = DELETE_VARIANT_PREFIX
        elif raw.startswith(DELETE_PRODUCT_PREFIX):
            prefix = DELETE_PRODUCT_PREFIX
        else:
            raise ValidationError(f"invalid deletion id {raw!r}")
        value = raw[len(prefix):]
        if not value.isdigit():
            raise ValidationError(f"invalid deletion id {raw!r}")

        targets = [int(value)] if prefix == DELETE_VARIANT_PREFIX else by_product.get(int(value), [])
        resolved.extend(t for t in targets if t not in resolved)
    return resolved


class CatalogService:
    def __init__(
        self,
        catalog_store: CatalogStore,
        storefront: StorefrontClient,
        reconciliation: ReconciliationService,
        settings: Settings,
    ) -> None:
        self._store = catalog_store
        self._storefront = storefront
        self._reconciliation = reconciliation
        self._page_size = min(settings.catalog_page_size, STOREFRONT_PAGE_LIMIT)
        self._db_chunk_size = settings.db_merge_chunk_size
        self._weight_chunk_size = settings.weight_fetch_chunk_size
        self._storefront_domain = settings.storefront_domain

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    async def get_hierarchy(self) -> List[ProductNode]:
        return build_hierarchy(await self._store.list_variants())

    async def fetch_live(self) -> List[Variant]:
        products = await self._storefront.fetch_all_products(self._page_size)
        return transform_products(products, self._storefront_domain)

    async def preview_sync(self) -> SyncPreview:
        local = await self._store.list_variants()
        live = await self.fetch_live()
        return diff_snapshots(local, live)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    async def commit(self, request: CommitRequest, buffer: Optional[EditBuffer] = None) -> CommitReport:
        """Stage the request into a buffer, gate live diffs, persist."""
        buffer = buffer or EditBuffer()

        for edit in request.edits:
            buffer.stage(edit.variant_id, edit.field, edit.value)

        if request.deletions:
            variants = await self._store.list_variants()
            buffer.stage_deletions(resolve_deletions(request.deletions, variants))

        if request.accept_all or request.accept_variant_ids:
            buffer.load_preview(await self.preview_sync())
            if request.accept_all:
                buffer.accept_all()
            else:
                for variant_id in request.accept_variant_ids:
                    buffer.accept(variant_id)

        change_set = buffer.commit()
        if change_set.is_empty:
            return CommitReport()
        return await self._reconciliation.commit(change_set)

    # ------------------------------------------------------------------
    # Weight sync
    # ------------------------------------------------------------------

    async def _fetch_weights(self, handle: str) -> Tuple[str, Optional[Dict[int, Any]]]:
        try:
            product = await self._storefront.fetch_product(handle)
        except CatalogHubException as exc:
            logger.warning("weight fetch failed handle=%s error=%s", handle, exc)
            return handle, None
        if product is None:
            return handle, None
        return handle, {v["id"]: v.get("grams") for v in product.get("variants") or [] if "id" in v}

    async def preview_weights(self) -> WeightSyncPreview:
        rows = await self._store.list_weight_rows()
        handles = list(dict.fromkeys(row["handle"] for row in rows if row.get("handle")))

        fetched = await run_in_chunks(handles, self._fetch_weights, self._weight_chunk_size)
        live_weights: Dict[int, Any] = {}
        failed: List[str] = []
        for handle, weights in fetched:
            if weights is None:
                failed.append(handle)
            else:
                live_weights.update(weights)

        changes = [
            WeightChange(
                variant_id=row["variant_id"],
                handle=row.get("handle"),
                stored_weight=to_decimal(row.get("weight")),
                live_weight=to_decimal(live_weights[row["variant_id"]]),
            )
            for row in rows
            if row["variant_id"] in live_weights
            and numbers_differ(row.get("weight"), live_weights[row["variant_id"]])
        ]
        logger.info(
            "weight preview products=%d variants=%d changes=%d failed=%d",
            len(handles), len(live_weights), len(changes), len(failed),
        )
        return WeightSyncPreview(
            total_products=len(handles),
            total_variants=len(live_weights),
            changes=changes,
            failed_handles=failed,
        )

    async def apply_weights(self) -> WeightSyncResult:
        preview = await self.preview_weights()

        async def update(change: WeightChange) -> Tuple[int, bool]:
            try:
                await self._store.update_weight(change.variant_id, change.live_weight)
            except Exception as exc:
                logger.warning("weight update failed variant_id=%s error=%s", change.variant_id, exc)
                return change.variant_id, False
            return change.variant_id, True

        outcomes = await run_in_chunks(preview.changes, update, self._db_chunk_size)
        return WeightSyncResult(
            updated=sum(1 for _, ok in outcomes if ok),
            failed=[variant_id for variant_id, ok in outcomes if not ok],
        )
