"""
Expense store — expenses table, saved per type as a flattened tree.
Version: 1.0.0
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from catalog_hub.core.constants.catalog import EXPENSES_TABLE
from catalog_hub.core.exceptions import ValidationError
from catalog_hub.db.base_store import BaseStore
from catalog_hub.schemas.catalog import RowKind
from catalog_hub.schemas.expenses import ExpenseEdit, ExpenseRecord, ExpenseType
from catalog_hub.utils.expense_tree import ExpenseTree
from catalog_hub.utils.type_converters import to_json_value

logger = logging.getLogger("expense_store")

# Columns an operator may edit cell by cell
EDITABLE_COLUMNS = ("date", "item", "amount_rmb", "amount_usd", "person")


def _record_to_row(record: ExpenseRecord) -> Dict[str, Any]:
    return to_json_value(record.model_dump(mode="python"))


class ExpenseStore(BaseStore):
    """CRUD for hierarchical expense records."""

    async def load_tree(self, expense_type: ExpenseType) -> ExpenseTree:
        rows = await self._select(EXPENSES_TABLE, filters={"type": expense_type.value}, order="date")
        return ExpenseTree([ExpenseRecord.model_validate(row) for row in rows])

    async def save_tree(self, expense_type: ExpenseType, tree: ExpenseTree) -> int:
        """Replace the stored records of one type with the tree's records."""
        rows = [_record_to_row(record) for record in tree.flatten()]
        keep = {row["id"] for row in rows}

        existing = await self._select(EXPENSES_TABLE, columns="id", filters={"type": expense_type.value})
        removed = [row["id"] for row in existing if row["id"] not in keep]
        if removed:
            await self._delete_in(EXPENSES_TABLE, "id", removed)
            logger.info("expenses removed type=%s count=%d", expense_type.value, len(removed))

        await self._upsert(EXPENSES_TABLE, rows)
        return len(rows)

    async def apply_edit(self, expense_type: ExpenseType, edit: ExpenseEdit) -> ExpenseRecord:
        """Single-cell edit with recently-modified column tracking."""
        if edit.column not in EDITABLE_COLUMNS:
            raise ValidationError(f"column {edit.column} is not editable")

        tree = await self.load_tree(expense_type)
        record = tree.get(edit.id)
        if tree.kind(edit.id) == RowKind.GROUP and edit.column in ("amount_rmb", "amount_usd"):
            raise ValidationError("group amounts are derived from their children")

        edited = ExpenseRecord.model_validate({**record.model_dump(), edit.column: edit.value})
        tree = ExpenseTree([edited if r.id == edit.id else r for r in tree.flatten()])
        updated = tree.touch(edit.id, edit.column, datetime.now(timezone.utc))

        await self._update(EXPENSES_TABLE, {"id": edit.id}, _record_to_row(updated))
        return updated
