"""
Shopify payload builder — listing draft to productSet input.

Builds the create request plus the per-variant follow-ups (cost, stock)
keyed by the variant's position in the request. Rejects malformed numbers
before anything is sent.
Version: 1.0.0
"""
from decimal import Decimal
from typing import Any, Dict, List, NamedTuple, Optional

from catalog_hub.core.constants.publishing import (
    DEFAULT_OPTION_NAME,
    DEFAULT_OPTION_VALUE,
    INVENTORY_POLICY,
    PRODUCT_STATUS,
    WEIGHT_UNIT,
)
from catalog_hub.core.exceptions import ValidationError
from catalog_hub.schemas.listings import DraftData, DraftOption, DraftVariant
from catalog_hub.utils.type_converters import is_blank, to_decimal, to_json_value


class CostEntry(NamedTuple):
    index: int
    cost: Decimal


class StockEntry(NamedTuple):
    index: int
    quantity: int


class ProductSetPlan(NamedTuple):
    product_input: Dict[str, Any]
    costs: List[CostEntry]
    stock: List[StockEntry]


def _number(value: Any, field: str, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """Blank -> default; anything else must parse."""
    if is_blank(value):
        return default
    number = to_decimal(value)
    if number is None:
        raise ValidationError(f"{field} must be numeric, got {value!r}")
    return number


def _quantity(value: Any, field: str) -> Optional[int]:
    number = _number(value, field)
    if number is None:
        return None
    if number != number.to_integral_value():
        raise ValidationError(f"{field} must be a whole number, got {value!r}")
    return int(number)


def _variant_input(
    price: Any,
    compare_at_price: Any,
    sku: Optional[str],
    weight: Any,
    option_values: List[Dict[str, str]],
    label: str,
) -> Dict[str, Any]:
    variant: Dict[str, Any] = {
        "price": str(_number(price, f"{label}.price", Decimal("0"))),
        "inventoryItem": {
            "sku": sku or "",
            "measurement": {
                "weight": {"value": _number(weight, f"{label}.weight", Decimal("0")), "unit": WEIGHT_UNIT},
            },
        },
        "inventoryPolicy": INVENTORY_POLICY,
        "optionValues": option_values,
    }
    compare_at = _number(compare_at_price, f"{label}.compare_at_price")
    if compare_at is not None:
        variant["compareAtPrice"] = str(compare_at)
    return variant


def _option_values(variant: DraftVariant, options: List[DraftOption]) -> List[Dict[str, str]]:
    chosen = [variant.option1, variant.option2, variant.option3]
    return [
        {"optionName": option.name, "name": value}
        for option, value in zip(options, chosen)
        if value
    ]


def build_product_set_input(draft: DraftData) -> ProductSetPlan:
    if not draft.title:
        raise ValidationError("title is required")

    product_input: Dict[str, Any] = {
        "title": draft.title,
        "descriptionHtml": draft.description or "",
        "vendor": draft.vendor or "",
        "productType": draft.product_type or "",
        "status": PRODUCT_STATUS,
        "productOptions": [
            {"name": option.name, "values": [{"name": value} for value in option.values]}
            for option in draft.options
        ],
        "variants": [],
    }
    costs: List[CostEntry] = []
    stock: List[StockEntry] = []

    if draft.variants:
        for index, variant in enumerate(draft.variants):
            label = f"variants[{index}]"
            product_input["variants"].append(_variant_input(
                variant.price, variant.compare_at_price, variant.sku, variant.weight,
                _option_values(variant, draft.options), label,
            ))
            cost = _number(variant.cost, f"{label}.cost")
            if cost is not None:
                costs.append(CostEntry(index, cost))
            quantity = _quantity(variant.inventory_quantity, f"{label}.inventory_quantity")
            if quantity is not None:
                stock.append(StockEntry(index, quantity))
    else:
        # Single-variant product: Shopify's implicit Title / Default Title option
        product_input["productOptions"] = [
            {"name": DEFAULT_OPTION_NAME, "values": [{"name": DEFAULT_OPTION_VALUE}]},
        ]
        product_input["variants"].append(_variant_input(
            draft.price, draft.compare_at_price, draft.sku, draft.weight,
            [{"optionName": DEFAULT_OPTION_NAME, "name": DEFAULT_OPTION_VALUE}], "draft",
        ))
        cost = _number(draft.cost, "cost")
        if cost is not None:
            costs.append(CostEntry(0, cost))
        quantity = _quantity(draft.inventory_quantity, "inventory_quantity")
        if quantity is not None:
            stock.append(StockEntry(0, quantity))

    return ProductSetPlan(to_json_value(product_input), costs, stock)
