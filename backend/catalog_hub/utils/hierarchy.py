"""
Hierarchy builder — groups flat variant rows into product (SPU) nodes.

Pure and idempotent: same input, same output. Groups keep the order in
which their product id first appears; variants keep input order.
Version: 1.0.0
"""
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from catalog_hub.core.constants.catalog import VARIANT_TITLE_SEPARATOR
from catalog_hub.schemas.catalog import (
    PriceRange,
    ProductAggregates,
    ProductNode,
    Variant,
    VariantRow,
)


def group_by_product(variants: Iterable[Variant]) -> Dict[int, List[Variant]]:
    groups: Dict[int, List[Variant]] = {}
    for variant in variants:
        groups.setdefault(variant.product_id, []).append(variant)
    return groups


def product_title(variant_title: str) -> str:
    """Strip the ' - Variant' suffix from a combined variant title."""
    return variant_title.split(VARIANT_TITLE_SEPARATOR, 1)[0]


def _range(values: List[Optional[Decimal]]) -> PriceRange:
    present = [v for v in values if v is not None]
    if not present:
        return PriceRange()
    return PriceRange(min=min(present), max=max(present))


def compute_aggregates(variants: List[Variant]) -> ProductAggregates:
    total_cost = Decimal("0")
    total_profit = Decimal("0")
    for variant in variants:
        cost = variant.internal_meta.cost_price
        if cost is None:
            continue
        total_cost += cost
        if variant.price is not None:
            total_profit += variant.price - cost

    return ProductAggregates(
        variant_count=len(variants),
        total_inventory=sum(v.effective_inventory for v in variants),
        price_range=_range([v.price for v in variants]),
        compare_at_range=_range([v.compare_at_price for v in variants]),
        total_cost=total_cost,
        total_profit=total_profit,
    )


def build_product_node(product_id: int, variants: List[Variant], is_new: bool = False) -> ProductNode:
    first = variants[0]
    image_url = next((v.image_url for v in variants if v.image_url), None)
    return ProductNode(
        product_id=product_id,
        title=product_title(first.title),
        handle=first.handle,
        image_url=image_url,
        variants=[VariantRow(variant=v, is_new=is_new) for v in variants],
        aggregates=compute_aggregates(variants),
        has_changes=is_new,
        is_new=is_new,
    )


def build_hierarchy(variants: Iterable[Variant]) -> List[ProductNode]:
    """Group variants by product id into product nodes with roll-up aggregates."""
    return [
        build_product_node(product_id, group)
        for product_id, group in group_by_product(variants).items()
    ]
