"""
Shopify orchestrator — Admin GraphQL operations used by the publish pipeline.

Each method is one remote call. userErrors become ShopifyUserError;
transport failures come up from ShopifyClient as ExternalAPIError.
Version: 1.0.0
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from catalog_hub.clients.shopify_client import ShopifyClient
from catalog_hub.core.constants.publishing import (
    INVENTORY_ITEM_UPDATE_MUTATION,
    INVENTORY_QUANTITY_NAME,
    INVENTORY_REASON,
    INVENTORY_SET_QUANTITIES_MUTATION,
    LOCATIONS_PAGE_SIZE,
    LOCATIONS_QUERY,
    PRODUCT_SET_MUTATION,
)
from catalog_hub.core.exceptions import ShopifyUserError
from catalog_hub.schemas.listings import CreatedProduct, CreatedVariant

logger = logging.getLogger("shopify_orchestrator")


def _payload(data: Dict[str, Any], operation: str) -> Dict[str, Any]:
    payload = (data.get("data") or {}).get(operation) or {}
    user_errors = payload.get("userErrors") or []
    if user_errors:
        logger.info("shopify %s userErrors=%s", operation, user_errors)
        raise ShopifyUserError(operation, user_errors)
    return payload


class ShopifyOrchestrator:
    """High-level Shopify product operations."""

    def __init__(self, client: ShopifyClient) -> None:
        self._client = client

    async def create_product(self, product_input: Dict[str, Any]) -> CreatedProduct:
        """productSet (synchronous). Variants come back in request order."""
        data = await self._client.call_shopify_graphql(
            PRODUCT_SET_MUTATION, {"input": product_input, "synchronous": True},
        )
        product = _payload(data, "productSet").get("product") or {}
        if not product.get("id"):
            raise ShopifyUserError("productSet", [{"field": None, "message": "no product returned", "code": None}])

        nodes = (product.get("variants") or {}).get("nodes") or []
        created = CreatedProduct(
            id=product["id"],
            title=product.get("title"),
            status=product.get("status"),
            variants=[
                CreatedVariant(
                    id=node.get("id"),
                    inventory_item_id=(node.get("inventoryItem") or {}).get("id"),
                )
                for node in nodes
            ],
        )
        logger.info("shopify product created id=%s variants=%d", created.id, created.variants_count)
        return created

    async def update_inventory_item_cost(self, inventory_item_id: str, cost: Decimal) -> None:
        data = await self._client.call_shopify_graphql(
            INVENTORY_ITEM_UPDATE_MUTATION,
            {"id": inventory_item_id, "input": {"cost": str(cost)}},
        )
        _payload(data, "inventoryItemUpdate")

    async def get_first_active_location(self) -> Optional[str]:
        data = await self._client.call_shopify_graphql(LOCATIONS_QUERY, {"first": LOCATIONS_PAGE_SIZE})
        edges = ((data.get("data") or {}).get("locations") or {}).get("edges") or []
        for edge in edges:
            node = edge.get("node") or {}
            if node.get("isActive") and node.get("id"):
                return node["id"]
        return None

    async def set_on_hand_quantities(self, location_id: str, quantities: List[Tuple[str, int]]) -> None:
        """Absolute on-hand set for (inventory_item_id, quantity) pairs at one location."""
        if not quantities:
            return
        variables = {
            "input": {
                "name": INVENTORY_QUANTITY_NAME,
                "reason": INVENTORY_REASON,
                "ignoreCompareQuantity": True,
                "quantities": [
                    {"inventoryItemId": item_id, "locationId": location_id, "quantity": quantity}
                    for item_id, quantity in quantities
                ],
            }
        }
        data = await self._client.call_shopify_graphql(INVENTORY_SET_QUANTITIES_MUTATION, variables)
        _payload(data, "inventorySetQuantities")
        logger.info("shopify on-hand set location=%s items=%d", location_id, len(quantities))
