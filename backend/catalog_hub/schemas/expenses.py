"""
Expense schemas — hierarchical expense records.
Version: 1.0.0
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from catalog_hub.schemas.catalog import RowKind
from catalog_hub.utils.type_converters import to_decimal


class ExpenseType(str, Enum):
    PROCUREMENT = "procurement"
    LOGISTICS = "logistics"
    OPERATING = "operating"


class ExpenseRecord(BaseModel):
    """One expense row as stored (flat, parent_id links)."""
    id: str
    date: Optional[str] = None
    item: str = ""
    amount_rmb: Decimal = Decimal("0")
    amount_usd: Decimal = Decimal("0")
    person: Optional[str] = None
    type: ExpenseType
    parent_id: Optional[str] = None
    is_group: bool = False
    last_modified: Optional[datetime] = None
    last_modified_column: Optional[str] = None
    edit_window_started: Optional[datetime] = None

    @field_validator("amount_rmb", "amount_usd", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Decimal:
        return to_decimal(value) or Decimal("0")


class ExpenseNodeIn(BaseModel):
    """Nested record as submitted for save."""
    id: str
    date: Optional[str] = None
    item: str = ""
    amount_rmb: Any = 0
    amount_usd: Any = 0
    person: Optional[str] = None
    is_group: bool = False
    last_modified: Optional[datetime] = None
    last_modified_column: Optional[str] = None
    edit_window_started: Optional[datetime] = None
    children: List["ExpenseNodeIn"] = Field(default_factory=list)


class ExpenseSaveRequest(BaseModel):
    type: ExpenseType
    expenses: List[ExpenseNodeIn] = Field(default_factory=list)


class ExpenseEdit(BaseModel):
    """Single-cell edit; feeds the recently modified column tracking."""
    id: str
    column: str
    value: Any = None


class ExpenseTreeNode(BaseModel):
    kind: RowKind
    record: ExpenseRecord
    subtotal_rmb: Decimal = Decimal("0")
    subtotal_usd: Decimal = Decimal("0")
    children: List["ExpenseTreeNode"] = Field(default_factory=list)
