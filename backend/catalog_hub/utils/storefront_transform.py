"""
Storefront transform — products.json products into variant-level rows.
Version: 1.0.0
"""
from typing import Any, Dict, Iterable, List, Optional

from catalog_hub.core.constants.catalog import DEFAULT_VARIANT_TITLE, VARIANT_TITLE_SEPARATOR
from catalog_hub.schemas.catalog import Variant


def resolve_variant_image(variant: Dict[str, Any], product: Dict[str, Any]) -> Optional[str]:
    """featured_image.src, then the image_id match, then the product's first image."""
    featured = variant.get("featured_image") or {}
    if featured.get("src"):
        return featured["src"]

    images = product.get("images") or []
    image_id = variant.get("image_id")
    if image_id is not None:
        for image in images:
            if image.get("id") == image_id and image.get("src"):
                return image["src"]

    return images[0].get("src") if images else None


def format_variant_title(product_title: str, variant_title: Optional[str]) -> str:
    if not variant_title or variant_title == DEFAULT_VARIANT_TITLE:
        return product_title
    return f"{product_title}{VARIANT_TITLE_SEPARATOR}{variant_title}"


def landing_page_url(storefront_domain: Optional[str], handle: str, variant_id: int) -> Optional[str]:
    if not storefront_domain:
        return None
    return f"https://{storefront_domain}/products/{handle}?variant={variant_id}"


def transform_products(products: Iterable[Dict[str, Any]], storefront_domain: Optional[str]) -> List[Variant]:
    """Flatten products into one Variant per platform variant, input order kept."""
    variants: List[Variant] = []
    for product in products:
        handle = product.get("handle") or ""
        for variant in product.get("variants") or []:
            weight = variant.get("grams")
            if weight is None:
                weight = variant.get("weight")
            variants.append(Variant(
                variant_id=variant["id"],
                product_id=product["id"],
                title=format_variant_title(product.get("title") or "", variant.get("title")),
                handle=handle,
                sku=variant.get("sku") or "",
                price=variant.get("price"),
                compare_at_price=variant.get("compare_at_price"),
                inventory_quantity=variant.get("inventory_quantity"),
                weight=weight,
                image_url=resolve_variant_image(variant, product),
                landing_page_url=landing_page_url(storefront_domain, handle, variant["id"]),
                position=variant.get("position"),
            ))
    return variants
