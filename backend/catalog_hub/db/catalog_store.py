"""
Catalog store — products table (one row per platform variant).

Every write is scoped to a single variant_id row; internal_meta is only
ever written whole after a read-modify-write merge.
Version: 1.0.0
"""

import logging
from typing import Any, Dict, Iterable, List

from catalog_hub.core.constants.catalog import (
    CATALOG_READ_LIMIT,
    PRODUCTS_TABLE,
    VARIANT_CONFLICT_KEY,
)
from catalog_hub.core.exceptions import DataIntegrityError
from catalog_hub.db.base_store import BaseStore
from catalog_hub.schemas.catalog import Variant
from catalog_hub.utils.type_converters import to_json_value

logger = logging.getLogger("catalog_store")


def variant_to_row(variant: Variant) -> Dict[str, Any]:
    """Platform-owned columns for an upsert. internal_meta is left out so a
    conflicting row keeps its operator data; new rows get the column default."""
    return to_json_value({
        "variant_id": variant.variant_id,
        "shopify_product_id": variant.product_id,
        "title": variant.title,
        "handle": variant.handle,
        "sku": variant.sku,
        "price": variant.price,
        "compare_at_price": variant.compare_at_price,
        "inventory_quantity": variant.inventory_quantity,
        "weight": variant.weight,
        "image_url": variant.image_url,
        "landing_page_url": variant.landing_page_url,
        "position": variant.position,
    })


class CatalogStore(BaseStore):
    """CRUD for the products table."""

    async def list_variants(self) -> List[Variant]:
        rows = await self._select(
            PRODUCTS_TABLE, order="shopify_product_id", limit=CATALOG_READ_LIMIT,
        )
        return [Variant.from_row(row) for row in rows]

    async def get_internal_meta(self, variant_id: int) -> Dict[str, Any]:
        rows = await self._select(
            PRODUCTS_TABLE, columns="internal_meta", filters={"variant_id": variant_id},
        )
        if not rows:
            raise DataIntegrityError(f"variant {variant_id} not found in {PRODUCTS_TABLE}")
        return dict(rows[0].get("internal_meta") or {})

    async def merge_internal_meta(self, variant_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Partial merge: keys not in changes are preserved."""
        meta = await self.get_internal_meta(variant_id)
        meta.update(to_json_value(changes))
        await self._update(PRODUCTS_TABLE, {"variant_id": variant_id}, {"internal_meta": meta})
        return meta

    async def update_fields(self, variant_id: int, fields: Dict[str, Any]) -> None:
        rows = await self._update(PRODUCTS_TABLE, {"variant_id": variant_id}, to_json_value(fields))
        if not rows:
            raise DataIntegrityError(f"variant {variant_id} not found in {PRODUCTS_TABLE}")

    async def upsert_variant(self, variant: Variant) -> None:
        await self._upsert(PRODUCTS_TABLE, [variant_to_row(variant)], on_conflict=VARIANT_CONFLICT_KEY)

    async def delete_variants(self, variant_ids: Iterable[int]) -> int:
        deleted = await self._delete_in(PRODUCTS_TABLE, "variant_id", variant_ids)
        logger.info("deleted variants count=%d", len(deleted))
        return len(deleted)

    async def list_weight_rows(self) -> List[Dict[str, Any]]:
        return await self._select(
            PRODUCTS_TABLE,
            columns="handle, variant_id, weight, shopify_product_id",
            order="shopify_product_id",
            limit=CATALOG_READ_LIMIT,
        )

    async def update_weight(self, variant_id: int, weight: Any) -> None:
        await self.update_fields(variant_id, {"weight": weight})
