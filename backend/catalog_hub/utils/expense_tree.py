"""
Expense tree — arena-backed hierarchy of expense records.

Records live in one list (the arena); parent_id links are resolved once
into index adjacency at load. Rows whose parent is unknown become roots.
Parent cycles are rejected.
Version: 1.0.0
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from catalog_hub.core.exceptions import ValidationError
from catalog_hub.schemas.catalog import RowKind
from catalog_hub.schemas.expenses import ExpenseNodeIn, ExpenseRecord, ExpenseTreeNode, ExpenseType
from catalog_hub.utils.recent_edits import join_columns, merge_recent_fields, split_columns

logger = logging.getLogger("expense_tree")


class ExpenseTree:
    def __init__(self, records: List[ExpenseRecord]) -> None:
        self._records: List[ExpenseRecord] = list(records)
        self._index: Dict[str, int] = {}
        for position, record in enumerate(self._records):
            if record.id in self._index:
                raise ValidationError(f"duplicate expense id {record.id}")
            self._index[record.id] = position

        self._children: List[List[int]] = [[] for _ in self._records]
        self._roots: List[int] = []
        for position, record in enumerate(self._records):
            parent = self._index.get(record.parent_id) if record.parent_id else None
            if parent is None:
                if record.parent_id:
                    logger.warning("expense parent missing id=%s parent_id=%s", record.id, record.parent_id)
                self._roots.append(position)
            else:
                self._children[parent].append(position)

        reachable = sum(1 for _ in self._walk())
        if reachable != len(self._records):
            raise ValidationError("expense hierarchy contains a parent cycle")

    @classmethod
    def from_nested(cls, nodes: List[ExpenseNodeIn], expense_type: ExpenseType) -> "ExpenseTree":
        """Flatten submitted nested records, assigning parent_id from nesting."""
        records: List[ExpenseRecord] = []
        stack: List[Tuple[ExpenseNodeIn, Optional[str]]] = [(node, None) for node in reversed(nodes)]
        while stack:
            node, parent_id = stack.pop()
            records.append(ExpenseRecord(
                id=node.id,
                date=node.date,
                item=node.item,
                amount_rmb=node.amount_rmb,
                amount_usd=node.amount_usd,
                person=node.person,
                type=expense_type,
                parent_id=parent_id,
                is_group=node.is_group or bool(node.children),
                last_modified=node.last_modified,
                last_modified_column=node.last_modified_column,
                edit_window_started=node.edit_window_started,
            ))
            stack.extend((child, node.id) for child in reversed(node.children))
        return cls(records)

    def __len__(self) -> int:
        return len(self._records)

    def _walk(self):
        """Pre-order positions, roots in load order."""
        stack = list(reversed(self._roots))
        while stack:
            position = stack.pop()
            yield position
            stack.extend(reversed(self._children[position]))

    def _position(self, record_id: str) -> int:
        try:
            return self._index[record_id]
        except KeyError:
            raise ValidationError(f"unknown expense id {record_id}") from None

    def kind(self, record_id: str) -> RowKind:
        position = self._position(record_id)
        if self._records[position].is_group or self._children[position]:
            return RowKind.GROUP
        return RowKind.LEAF

    def get(self, record_id: str) -> ExpenseRecord:
        return self._records[self._position(record_id)]

    def flatten(self) -> List[ExpenseRecord]:
        return [self._records[position] for position in self._walk()]

    def _subtotals(self) -> List[Tuple[Decimal, Decimal]]:
        # Children always follow their parent in pre-order, so a reverse pass
        # sees every child before its parent.
        totals: List[Tuple[Decimal, Decimal]] = [(Decimal("0"), Decimal("0"))] * len(self._records)
        for position in reversed(list(self._walk())):
            children = self._children[position]
            if children:
                totals[position] = (
                    sum((totals[c][0] for c in children), Decimal("0")),
                    sum((totals[c][1] for c in children), Decimal("0")),
                )
            else:
                record = self._records[position]
                totals[position] = (record.amount_rmb, record.amount_usd)
        return totals

    def subtotal(self, record_id: str) -> Tuple[Decimal, Decimal]:
        """(rmb, usd) of a record; a group sums its descendants' leaves."""
        return self._subtotals()[self._position(record_id)]

    def total(self) -> Tuple[Decimal, Decimal]:
        totals = self._subtotals()
        return (
            sum((totals[r][0] for r in self._roots), Decimal("0")),
            sum((totals[r][1] for r in self._roots), Decimal("0")),
        )

    def to_nodes(self) -> List[ExpenseTreeNode]:
        totals = self._subtotals()
        built: Dict[int, ExpenseTreeNode] = {}
        for position in reversed(list(self._walk())):
            record = self._records[position]
            children = self._children[position]
            built[position] = ExpenseTreeNode(
                kind=RowKind.GROUP if record.is_group or children else RowKind.LEAF,
                record=record,
                subtotal_rmb=totals[position][0],
                subtotal_usd=totals[position][1],
                children=[built[c] for c in children],
            )
        return [built[r] for r in self._roots]

    def touch(self, record_id: str, column: str, now: datetime) -> ExpenseRecord:
        """Record an edit of column, merging with columns edited moments before."""
        position = self._position(record_id)
        record = self._records[position]
        # Rows saved before the anchor column existed fall back to last_modified
        anchor = record.edit_window_started or record.last_modified
        columns, anchor = merge_recent_fields(
            split_columns(record.last_modified_column), anchor, column, now,
        )
        updated = record.model_copy(update={
            "last_modified": now,
            "last_modified_column": join_columns(columns),
            "edit_window_started": anchor,
        })
        self._records[position] = updated
        return updated
