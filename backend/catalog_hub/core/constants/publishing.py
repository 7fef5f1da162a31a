"""
Publishing constants — productSet defaults and GraphQL documents.

Publish pipeline constants (Shopify Admin GraphQL).
Version: 1.0.0
"""

# Products are always created unpublished
PRODUCT_STATUS: str = "DRAFT"

# Single-variant products use Shopify's implicit option
DEFAULT_OPTION_NAME: str = "Title"
DEFAULT_OPTION_VALUE: str = "Default Title"

WEIGHT_UNIT: str = "GRAMS"
INVENTORY_POLICY: str = "DENY"

# Inventory adjustments
INVENTORY_QUANTITY_NAME: str = "on_hand"
INVENTORY_REASON: str = "correction"

LOCATIONS_PAGE_SIZE: int = 5

PRODUCT_SET_MUTATION: str = """
    mutation productSet($input: ProductSetInput!, $synchronous: Boolean!) {
        productSet(synchronous: $synchronous, input: $input) {
            product {
                id
                title
                status
                variants(first: 100) {
                    nodes {
                        id
                        title
                        inventoryItem {
                            id
                        }
                    }
                }
            }
            userErrors {
                field
                message
                code
            }
        }
    }
"""

INVENTORY_ITEM_UPDATE_MUTATION: str = """
    mutation inventoryItemUpdate($id: ID!, $input: InventoryItemInput!) {
        inventoryItemUpdate(id: $id, input: $input) {
            inventoryItem {
                id
            }
            userErrors {
                field
                message
            }
        }
    }
"""

LOCATIONS_QUERY: str = """
    query locations($first: Int!) {
        locations(first: $first) {
            edges {
                node {
                    id
                    name
                    isActive
                }
            }
        }
    }
"""

INVENTORY_SET_QUANTITIES_MUTATION: str = """
    mutation inventorySetQuantities($input: InventorySetQuantitiesInput!) {
        inventorySetQuantities(input: $input) {
            inventoryAdjustmentGroup {
                reason
            }
            userErrors {
                field
                message
                code
            }
        }
    }
"""
