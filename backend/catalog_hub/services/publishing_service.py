"""
Publishing service — listing draft to Shopify product.

State machine:
    draft -> creating -> created -> cost_syncing -> inventory_locating
          -> inventory_setting -> published
    draft / creating -> failed

Nothing is rolled back. Before `created` any failure ends the publish with
no side effects. After `created` the remote product exists, so follow-up
failures are recorded on the result and the draft is still marked pushed.
Version: 1.0.0
"""
import asyncio
import logging
from typing import List, Optional, Tuple

from catalog_hub.db.listing_store import ListingStore
from catalog_hub.schemas.listings import (
    CreatedProduct,
    ListingDraft,
    PublishResult,
    PublishState,
    StepError,
)
from catalog_hub.services.shopify_orchestrator import ShopifyOrchestrator
from catalog_hub.utils.shopify_payload_builder import CostEntry, StockEntry, build_product_set_input
from catalog_hub.utils.type_converters import extract_numeric_id

logger = logging.getLogger("publishing_service")


class PublishingService:
    def __init__(self, shopify: ShopifyOrchestrator, listing_store: ListingStore) -> None:
        self._shopify = shopify
        self._listings = listing_store

    async def publish_draft(self, draft_id: str) -> PublishResult:
        """Create the draft's product on Shopify and run the follow-up steps.

        Raises ValidationError, ShopifyUserError or ExternalAPIError when the
        product could not be created. Returns a result (possibly with step
        errors) once it has been.
        """
        states = [PublishState.DRAFT]
        draft = await self._listings.get_draft(draft_id)
        if draft.draft_data.is_pushed:
            # Not guarded: a second publish creates a second remote product
            logger.warning(
                "draft already pushed, publishing again id=%s shopify_product_id=%s",
                draft_id, draft.draft_data.shopify_product_id,
            )

        plan = build_product_set_input(draft.draft_data)

        states.append(PublishState.CREATING)
        try:
            product = await self._shopify.create_product(plan.product_input)
        except Exception:
            logger.info("publish failed before create id=%s states=%s", draft_id, states + [PublishState.FAILED])
            raise
        states.append(PublishState.CREATED)

        if product.variants_count != len(plan.product_input["variants"]):
            logger.warning(
                "variant count mismatch id=%s requested=%d created=%d",
                draft_id, len(plan.product_input["variants"]), product.variants_count,
            )

        errors: List[StepError] = []

        states.append(PublishState.COST_SYNCING)
        errors += await self._sync_costs(product, plan.costs)

        states.append(PublishState.INVENTORY_LOCATING)
        location_id, location_errors = await self._locate(plan.stock)
        errors += location_errors

        if location_id is not None:
            states.append(PublishState.INVENTORY_SETTING)
            errors += await self._set_inventory(product, plan.stock, location_id)

        pushed = await self._mark_pushed(draft, product)
        states.append(PublishState.PUBLISHED)

        return PublishResult(
            success=True,
            draft_id=draft_id,
            state=PublishState.PUBLISHED,
            states=states,
            product_id=extract_numeric_id(product.id),
            product_gid=product.id,
            title=product.title,
            status=product.status,
            variants_count=product.variants_count,
            errors=errors,
            pushed_flag_saved=pushed,
        )

    # ------------------------------------------------------------------
    # Steps after create
    # ------------------------------------------------------------------

    async def _sync_costs(self, product: CreatedProduct, costs: List[CostEntry]) -> List[StepError]:
        async def update(entry: CostEntry) -> Optional[StepError]:
            item_id = _inventory_item_id(product, entry.index)
            if item_id is None:
                logger.warning("cost skipped, no inventory item index=%d", entry.index)
                return StepError(step="cost", index=entry.index, message="no inventory item for variant")
            try:
                await self._shopify.update_inventory_item_cost(item_id, entry.cost)
            except Exception as exc:
                logger.warning("cost update failed index=%d error=%s", entry.index, exc)
                return StepError(step="cost", index=entry.index, message=str(exc))
            return None

        results = await asyncio.gather(*(update(entry) for entry in costs))
        return [error for error in results if error is not None]

    async def _locate(self, stock: List[StockEntry]) -> Tuple[Optional[str], List[StepError]]:
        if not stock:
            return None, []
        try:
            location_id = await self._shopify.get_first_active_location()
        except Exception as exc:
            logger.warning("location lookup failed error=%s", exc)
            return None, [StepError(step="location", message=str(exc))]
        if location_id is None:
            logger.warning("no active location, inventory not set")
            return None, [StepError(step="location", message="no active location")]
        return location_id, []

    async def _set_inventory(
        self, product: CreatedProduct, stock: List[StockEntry], location_id: str
    ) -> List[StepError]:
        errors: List[StepError] = []
        quantities: List[Tuple[str, int]] = []
        for entry in stock:
            item_id = _inventory_item_id(product, entry.index)
            if item_id is None:
                errors.append(StepError(step="inventory", index=entry.index, message="no inventory item for variant"))
                continue
            quantities.append((item_id, entry.quantity))

        try:
            await self._shopify.set_on_hand_quantities(location_id, quantities)
        except Exception as exc:
            logger.warning("inventory set failed location=%s error=%s", location_id, exc)
            errors.append(StepError(step="inventory", message=str(exc)))
        return errors

    async def _mark_pushed(self, draft: ListingDraft, product: CreatedProduct) -> bool:
        numeric_id = extract_numeric_id(product.id)
        try:
            await self._listings.mark_pushed(draft.id, numeric_id)
        except Exception as exc:
            # Remote product exists but the draft does not know it
            logger.error(
                "push flag not saved id=%s shopify_product_id=%s error=%s",
                draft.id, numeric_id, exc,
            )
            return False
        return True


def _inventory_item_id(product: CreatedProduct, index: int) -> Optional[str]:
    if index >= len(product.variants):
        return None
    return product.variants[index].inventory_item_id
