"""
Catalog schemas — variants, product (SPU) nodes, snapshot diffs.

Product nodes are derived views; only Variant rows are persisted.
Version: 1.0.0
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from catalog_hub.utils.type_converters import format_currency, to_decimal, to_int


class RowKind(str, Enum):
    """Discriminant shared by every tabular row (catalog and expenses)."""
    LEAF = "leaf"
    GROUP = "group"
    PRODUCT = "product"
    VARIANT = "variant"


class InternalMeta(BaseModel):
    """Operator-owned fields stored in products.internal_meta.

    Unknown keys are kept so a round trip never drops them.
    """
    model_config = ConfigDict(extra="allow")

    cost_price: Optional[Decimal] = None
    supplier: Optional[str] = None
    vendor: Optional[str] = None
    notes: Optional[str] = None
    manual_inventory: Optional[int] = None
    inventory_updated_at: Optional[datetime] = None

    @field_validator("cost_price", mode="before")
    @classmethod
    def _coerce_cost(cls, value: Any) -> Optional[Decimal]:
        return to_decimal(value)

    @field_validator("manual_inventory", mode="before")
    @classmethod
    def _coerce_manual_inventory(cls, value: Any) -> Optional[int]:
        return to_int(value)


class Variant(BaseModel):
    variant_id: int
    product_id: int
    title: str = ""
    handle: Optional[str] = None
    sku: Optional[str] = None
    price: Optional[Decimal] = None
    compare_at_price: Optional[Decimal] = None
    inventory_quantity: int = 0
    weight: Optional[Decimal] = None
    image_url: Optional[str] = None
    landing_page_url: Optional[str] = None
    position: Optional[int] = None
    internal_meta: InternalMeta = Field(default_factory=InternalMeta)

    @field_validator("price", "compare_at_price", "weight", mode="before")
    @classmethod
    def _coerce_decimal(cls, value: Any) -> Optional[Decimal]:
        return to_decimal(value)

    @field_validator("inventory_quantity", mode="before")
    @classmethod
    def _coerce_inventory(cls, value: Any) -> int:
        return to_int(value) or 0

    @field_validator("internal_meta", mode="before")
    @classmethod
    def _coerce_meta(cls, value: Any) -> Any:
        return value or {}

    @property
    def effective_inventory(self) -> int:
        """Manual override wins over the platform quantity."""
        manual = self.internal_meta.manual_inventory
        return manual if manual is not None else self.inventory_quantity

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Variant":
        """Build from a products table row (product id column is shopify_product_id)."""
        data = dict(row)
        if "product_id" not in data:
            data["product_id"] = data.get("shopify_product_id")
        return cls.model_validate(data)


class PriceRange(BaseModel):
    min: Optional[Decimal] = None
    max: Optional[Decimal] = None

    @computed_field
    @property
    def display(self) -> str:
        if self.min is None or self.max is None:
            return "-"
        if self.min == self.max:
            return format_currency(self.min)
        return f"{format_currency(self.min)} - {format_currency(self.max)}"


class ProductAggregates(BaseModel):
    variant_count: int = 0
    total_inventory: int = 0
    price_range: PriceRange = Field(default_factory=PriceRange)
    compare_at_range: PriceRange = Field(default_factory=PriceRange)
    total_cost: Decimal = Decimal("0")
    total_profit: Decimal = Decimal("0")


class VariantDiff(BaseModel):
    """Field-level differences between the stored and the live copy of a variant."""
    variant_id: int
    price_changed: bool = False
    compare_at_changed: bool = False
    inventory_changed: bool = False
    previous: Dict[str, Any] = Field(default_factory=dict)
    live: Dict[str, Any] = Field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return self.price_changed or self.compare_at_changed or self.inventory_changed

    @property
    def changed_fields(self) -> List[str]:
        flags = {
            "price": self.price_changed,
            "compare_at_price": self.compare_at_changed,
            "inventory_quantity": self.inventory_changed,
        }
        return [field for field, changed in flags.items() if changed]

    def display(self, field: str) -> Optional[str]:
        """Render a changed field as '<live> (was <previous>)'."""
        if field not in self.changed_fields:
            return None
        previous = self.previous.get(field)
        return f"{_plain(self.live.get(field))} (was {_plain(previous)})"


def _plain(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    return str(value)


class VariantRow(BaseModel):
    kind: Literal[RowKind.VARIANT] = RowKind.VARIANT
    variant: Variant
    diff: Optional[VariantDiff] = None
    is_new: bool = False


class ProductNode(BaseModel):
    kind: Literal[RowKind.PRODUCT] = RowKind.PRODUCT
    product_id: int
    title: str
    handle: Optional[str] = None
    image_url: Optional[str] = None
    variants: List[VariantRow] = Field(default_factory=list)
    aggregates: ProductAggregates = Field(default_factory=ProductAggregates)
    # Local aggregates kept for "was" display when live values differ
    previous_aggregates: Optional[ProductAggregates] = None
    has_changes: bool = False
    is_new: bool = False


class SyncPreview(BaseModel):
    """Stored vs live comparison, ordered new -> changed -> unchanged."""
    nodes: List[ProductNode] = Field(default_factory=list)
    diffs: Dict[int, VariantDiff] = Field(default_factory=dict)
    new_variants: List[Variant] = Field(default_factory=list)

    @computed_field
    @property
    def changed_count(self) -> int:
        return len(self.diffs)

    @computed_field
    @property
    def new_count(self) -> int:
        return len(self.new_variants)


class WeightChange(BaseModel):
    variant_id: int
    handle: Optional[str] = None
    stored_weight: Optional[Decimal] = None
    live_weight: Optional[Decimal] = None


class WeightSyncPreview(BaseModel):
    total_products: int = 0
    total_variants: int = 0
    changes: List[WeightChange] = Field(default_factory=list)
    failed_handles: List[str] = Field(default_factory=list)


class WeightSyncResult(BaseModel):
    updated: int = 0
    failed: List[int] = Field(default_factory=list)
