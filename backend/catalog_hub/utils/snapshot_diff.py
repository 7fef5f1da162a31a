"""
Snapshot differ — stored catalog vs live storefront snapshot.

A stored variant missing from the live snapshot gets no diff: absence is
never treated as removal. Live variants missing locally are "new"; they
join their product's node when that product is stored, otherwise they
form new product nodes.
Version: 1.0.0
"""
import logging
from typing import Dict, List

from catalog_hub.core.constants.catalog import DIFF_FIELDS
from catalog_hub.schemas.catalog import (
    ProductNode,
    SyncPreview,
    Variant,
    VariantDiff,
    VariantRow,
)
from catalog_hub.utils.hierarchy import (
    build_product_node,
    compute_aggregates,
    group_by_product,
    product_title,
)
from catalog_hub.utils.type_converters import numbers_differ

logger = logging.getLogger("snapshot_diff")


def diff_variant(local: Variant, live: Variant) -> VariantDiff:
    previous = {field: getattr(local, field) for field in DIFF_FIELDS}
    current = {field: getattr(live, field) for field in DIFF_FIELDS}
    return VariantDiff(
        variant_id=local.variant_id,
        price_changed=numbers_differ(previous["price"], current["price"]),
        compare_at_changed=numbers_differ(previous["compare_at_price"], current["compare_at_price"]),
        inventory_changed=numbers_differ(previous["inventory_quantity"], current["inventory_quantity"]),
        previous=previous,
        live=current,
    )


def _with_live_values(local: Variant, live: Variant) -> Variant:
    return local.model_copy(update={field: getattr(live, field) for field in DIFF_FIELDS})


def diff_snapshots(local: List[Variant], live: List[Variant]) -> SyncPreview:
    """Compare stored and live variants and build the preview hierarchy."""
    live_by_id = {v.variant_id: v for v in live}
    local_ids = {v.variant_id for v in local}

    new_variants = [v for v in live if v.variant_id not in local_ids]
    new_by_product = group_by_product(new_variants)

    diffs: Dict[int, VariantDiff] = {}
    changed_nodes: List[ProductNode] = []
    unchanged_nodes: List[ProductNode] = []

    for product_id, group in group_by_product(local).items():
        rows: List[VariantRow] = []
        current: List[Variant] = []
        for variant in group:
            live_variant = live_by_id.get(variant.variant_id)
            if live_variant is None:
                rows.append(VariantRow(variant=variant))
                current.append(variant)
                continue
            diff = diff_variant(variant, live_variant)
            if diff.has_changes:
                diffs[variant.variant_id] = diff
            rows.append(VariantRow(variant=variant, diff=diff if diff.has_changes else None))
            current.append(_with_live_values(variant, live_variant))

        added = new_by_product.pop(product_id, [])
        rows.extend(VariantRow(variant=v, is_new=True) for v in added)
        current.extend(added)

        has_changes = bool(added) or any(row.diff is not None for row in rows)
        node = ProductNode(
            product_id=product_id,
            title=product_title(group[0].title),
            handle=group[0].handle,
            image_url=next((v.image_url for v in group if v.image_url), None),
            variants=rows,
            aggregates=compute_aggregates(current),
            previous_aggregates=compute_aggregates(group) if has_changes else None,
            has_changes=has_changes,
        )
        (changed_nodes if has_changes else unchanged_nodes).append(node)

    new_nodes = [
        build_product_node(product_id, group, is_new=True)
        for product_id, group in new_by_product.items()
    ]

    logger.info(
        "snapshot diff local=%d live=%d changed=%d new=%d",
        len(local), len(live), len(diffs), len(new_variants),
    )
    return SyncPreview(
        nodes=new_nodes + changed_nodes + unchanged_nodes,
        diffs=diffs,
        new_variants=new_variants,
    )
