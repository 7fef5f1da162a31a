"""
Listing schemas — drafts and publish results.

draft_data is an open JSON blob; unknown keys are kept.
Version: 1.0.0
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DraftStatus(str, Enum):
    DRAFT = "draft"
    READY = "ready"


class DraftOption(BaseModel):
    name: str
    values: List[str] = Field(default_factory=list)


class DraftVariant(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    title: Optional[str] = None
    sku: Optional[str] = None
    price: Any = None
    compare_at_price: Any = None
    cost: Any = None
    weight: Any = None
    inventory_quantity: Any = None
    option1: Optional[str] = None
    option2: Optional[str] = None
    option3: Optional[str] = None


class DraftData(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    description: Optional[str] = None
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    sku: Optional[str] = None
    price: Any = 0
    compare_at_price: Any = None
    cost: Any = None
    weight: Any = None
    inventory_quantity: Any = None
    note: str = ""
    purchase_link: str = ""
    options: List[DraftOption] = Field(default_factory=list)
    variants: List[DraftVariant] = Field(default_factory=list)
    is_pushed: bool = False
    shopify_product_id: Optional[str] = None


class ListingDraft(BaseModel):
    id: str
    product_id: Optional[str] = None
    draft_data: DraftData = Field(default_factory=DraftData)
    status: DraftStatus = DraftStatus.DRAFT
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ListingDraft":
        data = dict(row)
        data["id"] = str(data.get("id"))
        data["draft_data"] = data.get("draft_data") or {}
        return cls.model_validate(data)


# -- Publish --------------------------------------------------------------

class PublishState(str, Enum):
    DRAFT = "draft"
    CREATING = "creating"
    CREATED = "created"
    COST_SYNCING = "cost_syncing"
    INVENTORY_LOCATING = "inventory_locating"
    INVENTORY_SETTING = "inventory_setting"
    PUBLISHED = "published"
    FAILED = "failed"


class StepError(BaseModel):
    step: str
    message: str
    index: Optional[int] = None


class CreatedVariant(BaseModel):
    id: Optional[str] = None
    inventory_item_id: Optional[str] = None


class CreatedProduct(BaseModel):
    id: str
    title: Optional[str] = None
    status: Optional[str] = None
    variants: List[CreatedVariant] = Field(default_factory=list)

    @property
    def variants_count(self) -> int:
        return len(self.variants)


class PublishResult(BaseModel):
    success: bool
    draft_id: str
    state: PublishState
    states: List[PublishState] = Field(default_factory=list)
    product_id: Optional[str] = None
    product_gid: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None
    variants_count: int = 0
    errors: List[StepError] = Field(default_factory=list)
    pushed_flag_saved: bool = False
