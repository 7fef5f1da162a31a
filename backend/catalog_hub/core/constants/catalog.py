"""
Catalog constants — table names, snapshot fields, edit window.
Version: 1.0.0
"""

PRODUCTS_TABLE: str = "products"
LISTING_DRAFTS_TABLE: str = "listing_drafts"
EXPENSES_TABLE: str = "expenses"

# Upsert conflict key for the stored catalog
VARIANT_CONFLICT_KEY: str = "variant_id"

# Shopify's placeholder title for single-variant products
DEFAULT_VARIANT_TITLE: str = "Default Title"

# Separator between product and variant title in a combined variant title
VARIANT_TITLE_SEPARATOR: str = " - "

# Storefront products.json page limit (maximum the storefront accepts)
STOREFRONT_PAGE_LIMIT: int = 250

# Upper bound for a single catalog read (PostgREST range is inclusive)
CATALOG_READ_LIMIT: int = 10000

# Fields compared between the stored and the live snapshot
DIFF_FIELDS: tuple[str, ...] = ("price", "compare_at_price", "inventory_quantity")

# Platform-owned columns an accepted sync value may overwrite
SYNC_FIELDS: tuple[str, ...] = (
    "title",
    "handle",
    "sku",
    "price",
    "compare_at_price",
    "inventory_quantity",
    "weight",
    "image_url",
    "landing_page_url",
    "position",
)

# Trailing window that groups consecutive edits of one entity for display
RECENT_EDIT_WINDOW_SECONDS: int = 60

# Operator deletion ids: "variant-<variant_id>" or "spu-<product_id>"
DELETE_VARIANT_PREFIX: str = "variant-"
DELETE_PRODUCT_PREFIX: str = "spu-"
