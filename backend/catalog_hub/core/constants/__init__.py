"""
Constants package — re-exports from domain-specific modules.

Usage:
    from catalog_hub.core.constants.catalog import DIFF_FIELDS
    from catalog_hub.core.constants.publishing import PRODUCT_STATUS
    # or import the modules:
    from catalog_hub.core.constants import catalog, publishing
Version: 1.0.0
"""

from catalog_hub.core.constants import catalog, publishing
from catalog_hub.core.constants.catalog import (
    DEFAULT_VARIANT_TITLE,
    DIFF_FIELDS,
    RECENT_EDIT_WINDOW_SECONDS,
    SYNC_FIELDS,
)
from catalog_hub.core.constants.publishing import (
    DEFAULT_OPTION_NAME,
    DEFAULT_OPTION_VALUE,
    INVENTORY_REASON,
    PRODUCT_STATUS,
    WEIGHT_UNIT,
)

__all__ = [
    "catalog",
    "publishing",
    "DEFAULT_VARIANT_TITLE",
    "DIFF_FIELDS",
    "RECENT_EDIT_WINDOW_SECONDS",
    "SYNC_FIELDS",
    "DEFAULT_OPTION_NAME",
    "DEFAULT_OPTION_VALUE",
    "INVENTORY_REASON",
    "PRODUCT_STATUS",
    "WEIGHT_UNIT",
]
